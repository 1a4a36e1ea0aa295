"""Virtual filesystem collaborators."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

MOUNT_SEPARATOR = ":/"


class VFSBackend(Protocol):
    """Operations the capture and restore paths need from a filesystem."""

    def readdir(self, path: str) -> list[dict[str, Any]]: ...

    def readfile(self, path: str, encoding: str = "text") -> str: ...

    def writefile(self, path: str, content: str) -> None: ...

    def mkdir(self, path: str) -> None: ...


def split_virtual_path(path: str) -> tuple[str, str]:
    """Split ``home:/a/b.txt`` into ``("home", "a/b.txt")``."""
    if MOUNT_SEPARATOR not in path:
        raise FileNotFoundError(f"Not a mounted path: {path}")
    mount, rest = path.split(MOUNT_SEPARATOR, 1)
    return mount, rest.strip("/")


def join_virtual_path(parent: str, name: str) -> str:
    if parent.endswith("/"):
        return f"{parent}{name}"
    return f"{parent}/{name}"


class LocalVFS:
    """Serves named mounts (``home:/``) from host directories."""

    def __init__(self, mounts: Mapping[str, Path]) -> None:
        self.mounts = {name: Path(root).resolve() for name, root in mounts.items()}
        self.logger = logging.getLogger("ds.vfs")

    def resolve(self, path: str) -> Path:
        mount, rel = split_virtual_path(path)
        root = self.mounts.get(mount)
        if root is None:
            raise FileNotFoundError(f"Unknown mount: {mount}")
        target = (root / rel).resolve() if rel else root
        try:
            target.relative_to(root)
        except ValueError as exc:
            raise PermissionError(f"Path traversal blocked: {path} is outside mount {mount}.") from exc
        return target

    def _stat(self, vpath: str, target: Path) -> dict[str, Any]:
        info = target.stat()
        is_dir = target.is_dir()
        mime = None if is_dir else (mimetypes.guess_type(target.name)[0] or "application/octet-stream")
        return {
            "path": vpath,
            "filename": target.name,
            "mime": mime,
            "size": 0 if is_dir else info.st_size,
            "isDirectory": is_dir,
            "isFile": target.is_file(),
            "mtime": datetime.fromtimestamp(info.st_mtime, UTC).isoformat(),
        }

    def readdir(self, path: str) -> list[dict[str, Any]]:
        base = self.resolve(path)
        if not base.is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")
        entries = []
        for child in sorted(base.iterdir(), key=lambda p: p.name):
            if child.is_symlink():
                self.logger.debug("Skipping symlink %s", child)
                continue
            entries.append(self._stat(join_virtual_path(path, child.name), child))
        return entries

    def readfile(self, path: str, encoding: str = "text") -> str:
        codec = "utf-8" if encoding == "text" else encoding
        return self.resolve(path).read_bytes().decode(codec)

    def writefile(self, path: str, content: str) -> None:
        self.resolve(path).write_bytes(content.encode("utf-8"))

    def mkdir(self, path: str) -> None:
        self.resolve(path).mkdir(exist_ok=True)
