"""Top-level runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from apps.registry import build_default_registry
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from environment.settings import YamlSettingsStore
from environment.vfs import LocalVFS
from environment.windows import WindowRegistry
from session.capture import DEFAULT_ROOT, SessionCapture
from session.context import ActiveSession
from session.inspector import SessionInspector
from session.registry import SerializerRegistry
from session.restore import SessionRestore
from session.store import SessionStore


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    registry: SerializerRegistry
    vfs: LocalVFS
    windows: WindowRegistry
    settings: YamlSettingsStore
    store: SessionStore
    capture: SessionCapture
    restore: SessionRestore
    inspector: SessionInspector


class Orchestrator:
    """Creates and wires session components for CLI use."""

    def __init__(self, root: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root)
        paths = ensure_runtime_dirs(self.root, config)

        registry = build_default_registry(config)
        vfs = LocalVFS(paths["mounts"])
        windows = WindowRegistry()
        settings = YamlSettingsStore(paths["settings_path"])
        active = ActiveSession()

        return RuntimeBundle(
            config=config,
            registry=registry,
            vfs=vfs,
            windows=windows,
            settings=settings,
            store=SessionStore(paths["sessions_dir"], active=active),
            capture=SessionCapture(
                vfs=vfs,
                windows=windows,
                settings=settings,
                registry=registry,
                default_root=str(config.get("capture", {}).get("root", DEFAULT_ROOT)),
            ),
            restore=SessionRestore(vfs=vfs, windows=windows, settings=settings, registry=registry),
            inspector=SessionInspector(active),
        )
