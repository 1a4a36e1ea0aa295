"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from session.errors import ConfigurationError


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file is not valid YAML: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Any]:
    """Create session and mount directories and return resolved paths."""
    paths_cfg = config.get("paths", {})
    sessions_dir = (root / paths_cfg.get("sessions_dir", "sessions")).resolve()
    settings_path = (root / paths_cfg.get("settings_path", "workspace/settings.yaml")).resolve()

    mounts_cfg = config.get("vfs", {}).get("mounts", {"home": "workspace/home"})
    mounts = {name: (root / str(rel)).resolve() for name, rel in mounts_cfg.items()}

    sessions_dir.mkdir(parents=True, exist_ok=True)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    for mount_dir in mounts.values():
        mount_dir.mkdir(parents=True, exist_ok=True)

    return {
        "sessions_dir": sessions_dir,
        "settings_path": settings_path,
        "mounts": mounts,
    }


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load default config and apply the optional local override."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    local_cfg = load_yaml(config_dir / "local.yaml")
    return merge_dicts(default_cfg, local_cfg)
