"""Capture live desktop state into a session manifest."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from environment.settings import SettingsBackend
from environment.vfs import VFSBackend
from session.protocol import (
    GENERIC_APP_TYPE,
    ProcessDescriptor,
    SessionManifest,
    VFSNode,
    create_manifest,
    create_process_descriptor,
    serialize_vfs_node,
    serialize_window_state,
)
from session.registry import SerializerRegistry

DEFAULT_ROOT = "home:/"


@dataclass(frozen=True)
class NodeOutcome:
    """Result of visiting one path during VFS traversal."""

    path: str
    status: str
    reason: str = ""


@dataclass
class VFSTraversal:
    """Snapshot plus per-path outcomes of one traversal."""

    snapshot: dict[str, VFSNode] = field(default_factory=dict)
    outcomes: list[NodeOutcome] = field(default_factory=list)

    @property
    def skipped(self) -> list[NodeOutcome]:
        return [o for o in self.outcomes if o.status == "skipped"]


class SessionCapture:
    """Walks the VFS, window set and settings to produce a manifest."""

    def __init__(
        self,
        vfs: VFSBackend,
        windows: Iterable[Any],
        settings: SettingsBackend,
        registry: SerializerRegistry,
        default_root: str = DEFAULT_ROOT,
    ) -> None:
        self.vfs = vfs
        self.windows = windows
        self.settings = settings
        self.registry = registry
        self.default_root = default_root
        self.logger = logging.getLogger("ds.capture")

    def _list(self, path: str, traversal: VFSTraversal) -> list[dict[str, Any]] | None:
        try:
            return list(self.vfs.readdir(path))
        except Exception as exc:
            self.logger.warning("Failed to traverse %s: %s", path, exc)
            traversal.outcomes.append(NodeOutcome(path, "skipped", f"readdir failed: {exc}"))
            return None

    def traverse_vfs(self, root_path: str | None = None) -> VFSTraversal:
        """Pre-order depth-first walk using an explicit stack."""
        root = root_path or self.default_root
        traversal = VFSTraversal()
        entries = self._list(root, traversal)
        # Reversed so that pop() yields siblings in listing order.
        stack = list(reversed(entries or []))

        while stack:
            entry = stack.pop()
            path = entry.get("path", "")
            if entry.get("isDirectory"):
                children = self._list(path, traversal)
                if children is None:
                    continue
                traversal.snapshot[path] = serialize_vfs_node(entry)
                traversal.outcomes.append(NodeOutcome(path, "captured"))
                stack.extend(reversed(children))
            elif entry.get("isFile"):
                try:
                    content: str | None = self.vfs.readfile(path, "text")
                    outcome = NodeOutcome(path, "captured")
                except UnicodeDecodeError:
                    content = None
                    outcome = NodeOutcome(path, "captured", "binary content not captured")
                except Exception as exc:
                    self.logger.warning("Failed to read %s: %s", path, exc)
                    traversal.outcomes.append(NodeOutcome(path, "skipped", f"readfile failed: {exc}"))
                    continue
                traversal.snapshot[path] = serialize_vfs_node(entry, content)
                traversal.outcomes.append(outcome)

        return traversal

    def capture_vfs(self, root_path: str | None = None) -> dict[str, VFSNode]:
        return self.traverse_vfs(root_path).snapshot

    def capture_processes(self) -> list[ProcessDescriptor]:
        """Describe every open window in enumeration order."""
        processes: list[ProcessDescriptor] = []
        for window in self.windows:
            window_state = serialize_window_state(window)
            app_type = getattr(window, "app_type", None) or GENERIC_APP_TYPE

            app_state: Any = {}
            serializer = self.registry.lookup(app_type)
            if serializer is None:
                self.logger.warning("No serializer registered for app type: %s", app_type)
            else:
                try:
                    app_state = serializer.serialize(window)
                except Exception as exc:
                    self.logger.error("Failed to serialize app %s: %s", app_type, exc)
                    app_state = {}

            processes.append(create_process_descriptor(app_type, window_state, app_state))
        return processes

    def capture_settings(self) -> dict[str, Any]:
        return dict(self.settings.get() or {})

    def capture_session(self, root_path: str | None = None) -> SessionManifest:
        """Capture VFS, processes and settings, then derive metadata."""
        manifest = create_manifest()
        manifest.vfs = self.capture_vfs(root_path)
        manifest.processes = self.capture_processes()
        manifest.settings = self.capture_settings()
        manifest.metadata = {
            "windowCount": len(manifest.processes),
            "fileCount": len(manifest.vfs),
            "captureSize": manifest.encoded_size(),
        }
        self.logger.info(
            "Captured session: %d process(es), %d VFS node(s)",
            len(manifest.processes),
            len(manifest.vfs),
        )
        return manifest
