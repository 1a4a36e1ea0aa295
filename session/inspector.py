"""Read-only queries over the active session manifest."""

from __future__ import annotations

from typing import Any

from session.context import ActiveSession
from session.protocol import VFSNode

FILESYSTEM_ROOT = "/"


def _node_type(node: VFSNode) -> str:
    return "directory" if node.is_directory else "file"


def _segments(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


class SessionInspector:
    """Answers inspection queries without mutating the active manifest.

    Every query reads the active reference once and returns ``None`` or an
    empty list when no session is active.
    """

    def __init__(self, active: ActiveSession) -> None:
        self.active = active

    def inspect_session(self) -> dict[str, Any] | None:
        manifest = self.active.current
        if manifest is None:
            return None
        return {
            "version": manifest.version,
            "timestamp": manifest.timestamp,
            "metadata": dict(manifest.metadata),
            "processCount": len(manifest.processes),
            "fileCount": len(manifest.vfs),
            "processes": [proc.to_dict() for proc in manifest.processes],
        }

    def inspect_vfs(self, path: str | None = None) -> list[dict[str, Any]] | dict[str, Any] | None:
        """List every node, or return the raw node at ``path``."""
        manifest = self.active.current
        if manifest is None:
            return None
        if path:
            node = manifest.vfs.get(path)
            return node.to_dict() if node else None
        return [
            {"path": node_path, "type": _node_type(node), "size": node.size, "mime": node.mime}
            for node_path, node in manifest.vfs.items()
        ]

    def get_vfs_tree(self, root_path: str = "home:/") -> dict[str, Any] | None:
        """Nest nodes under ``root_path`` by path segment.

        Only nodes whose leading segments equal the root's are kept, so
        ``home:/dir`` does not pick up ``home:/dir2``.

        When two entries disagree on whether a segment is a leaf or a branch,
        the later entry overwrites the earlier one.
        """
        manifest = self.active.current
        if manifest is None:
            return None

        whole = root_path == FILESYSTEM_ROOT
        root_parts = [] if whole else _segments(root_path)
        tree: dict[str, Any] = {}
        leaves: dict[int, dict[str, Any]] = {}
        for path, node in manifest.vfs.items():
            parts = _segments(path)
            if parts[: len(root_parts)] != root_parts:
                continue
            parts = parts[len(root_parts):]
            if not parts:
                continue

            current = tree
            for part in parts[:-1]:
                branch = current.get(part)
                if branch is None or id(branch) in leaves:
                    branch = {}
                    current[part] = branch
                current = branch
            leaf = {
                "type": _node_type(node),
                "mime": node.mime,
                "size": node.size,
                "content": node.content,
            }
            leaves[id(leaf)] = leaf
            current[parts[-1]] = leaf
        return tree

    def inspect_processes(self, app_type: str | None = None) -> list[dict[str, Any]]:
        manifest = self.active.current
        if manifest is None:
            return []
        if app_type:
            return [proc.to_dict() for proc in manifest.processes if proc.type == app_type]
        return [
            {
                "type": proc.type,
                "title": proc.window_state.title,
                "timestamp": proc.timestamp,
                "hasAppState": bool(proc.app_state),
            }
            for proc in manifest.processes
        ]

    def get_process_detail(self, index: int) -> dict[str, Any] | None:
        manifest = self.active.current
        if manifest is None or index < 0 or index >= len(manifest.processes):
            return None
        return manifest.processes[index].to_dict()
