"""Configuration and runtime wiring tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.orchestrator import Orchestrator
from core.policy_runtime import ensure_runtime_dirs, load_effective_config, load_yaml, merge_dicts
from session.errors import ConfigurationError
from session.protocol import create_manifest


def test_load_yaml_missing_and_invalid(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") == {}

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_yaml(bad)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"c": 3}, "e": 4})

    assert merged == {"a": {"b": 1, "c": 3}, "d": 1, "e": 4}


def test_local_config_overrides_default(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(
        "apps:\n  calculator:\n    enabled: true\nlogging:\n  level: INFO\n", encoding="utf-8"
    )
    (config_dir / "local.yaml").write_text("apps:\n  calculator:\n    enabled: false\n", encoding="utf-8")

    config = load_effective_config(tmp_path)

    assert config["apps"]["calculator"]["enabled"] is False
    assert config["logging"]["level"] == "INFO"


def test_ensure_runtime_dirs_creates_mounts(tmp_path: Path) -> None:
    paths = ensure_runtime_dirs(tmp_path, {"vfs": {"mounts": {"home": "h", "docs": "d"}}})

    assert paths["sessions_dir"] == (tmp_path / "sessions").resolve()
    assert paths["mounts"]["docs"].is_dir()
    assert paths["mounts"]["home"].is_dir()


def test_orchestrator_wires_shared_active_session(tmp_path: Path) -> None:
    bundle = Orchestrator(root=tmp_path).build()

    assert bundle.inspector.active is bundle.store.active
    assert bundle.capture.default_root == "home:/"
    assert bundle.registry.types() == ["calculator", "text-editor"]


def test_saved_session_is_visible_to_inspector(tmp_path: Path) -> None:
    bundle = Orchestrator(root=tmp_path).build()

    bundle.store.save_session("desk", create_manifest())

    assert bundle.inspector.inspect_session()["processCount"] == 0
    assert bundle.inspector.inspect_vfs() == []
