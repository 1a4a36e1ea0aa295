"""Session manifest schema, factories and validation."""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from session.errors import ValidationError

SESSION_VERSION = "1.0.0"
GENERIC_APP_TYPE = "generic"


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def epoch_millis() -> int:
    return int(time.time() * 1000)


class _WireModel(BaseModel):
    """Base model accepting both camelCase wire keys and snake_case names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class WindowState(_WireModel):
    """Window chrome state captured from a live window handle."""

    id: Any = None
    title: str | None = None
    position: dict[str, Any] | None = None
    dimension: dict[str, Any] | None = None
    maximized: bool = False
    minimized: bool = False
    z_index: int | None = Field(default=None, alias="zIndex")


class VFSNode(_WireModel):
    """One file or directory in the captured virtual filesystem."""

    path: str = ""
    filename: str | None = None
    mime: str | None = None
    size: int | None = None
    is_directory: bool = Field(default=False, alias="isDirectory")
    is_file: bool = Field(default=False, alias="isFile")
    mtime: str | None = None
    content: str | None = None


class ProcessDescriptor(_WireModel):
    """A captured application window plus its opaque app state."""

    type: str = GENERIC_APP_TYPE
    window_state: WindowState = Field(default_factory=WindowState, alias="windowState")
    app_state: Any = Field(default_factory=dict, alias="appState")
    timestamp: int = Field(default_factory=epoch_millis)


class SessionManifest(_WireModel):
    """Versioned, transportable representation of one desktop session."""

    version: str = SESSION_VERSION
    timestamp: str = Field(default_factory=utc_timestamp)
    vfs: dict[str, VFSNode] = Field(default_factory=dict)
    processes: list[ProcessDescriptor] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def encoded_size(self) -> int:
        """Byte size of the compact UTF-8 JSON encoding."""
        compact = json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return len(compact.encode("utf-8"))


def create_manifest() -> SessionManifest:
    """Return an empty manifest stamped with the current version and time."""
    return SessionManifest(
        version=SESSION_VERSION,
        timestamp=utc_timestamp(),
        vfs={},
        processes=[],
        settings={},
        metadata={},
    )


def validate(manifest: Any) -> None:
    """Check the top-level manifest shape, raising ValidationError on failure."""
    if isinstance(manifest, SessionManifest):
        manifest = manifest.to_dict()
    if not isinstance(manifest, Mapping):
        raise ValidationError("Invalid manifest object")
    version = manifest.get("version")
    if version != SESSION_VERSION:
        raise ValidationError(f"Unsupported version: {version}")
    if not isinstance(manifest.get("processes"), (list, tuple)):
        raise ValidationError("Invalid processes array")
    if not isinstance(manifest.get("vfs"), Mapping):
        raise ValidationError("Invalid VFS object")


def decode_manifest(data: Any) -> SessionManifest:
    """Validate and decode raw manifest data, failing closed on any mismatch."""
    if isinstance(data, SessionManifest):
        data = data.to_dict()
    validate(data)
    try:
        return SessionManifest.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid manifest shape: {exc.error_count()} error(s): {exc}") from exc


def serialize_vfs_node(stat: Mapping[str, Any], content: str | None = None) -> VFSNode:
    """Convert a VFS listing entry into a manifest node."""
    return VFSNode(
        path=stat.get("path", ""),
        filename=stat.get("filename"),
        mime=stat.get("mime"),
        size=stat.get("size"),
        is_directory=bool(stat.get("isDirectory", False)),
        is_file=bool(stat.get("isFile", False)),
        mtime=stat.get("mtime"),
        content=content,
    )


def serialize_window_state(window: Any) -> WindowState:
    """Extract chrome state from a live window handle."""
    return WindowState(
        id=getattr(window, "id", None),
        title=getattr(window, "title", None),
        position=getattr(window, "position", None),
        dimension=getattr(window, "dimension", None),
        maximized=bool(getattr(window, "maximized", False)),
        minimized=bool(getattr(window, "minimized", False)),
        z_index=getattr(window, "z_index", None),
    )


def create_process_descriptor(
    app_type: str,
    window_state: WindowState,
    app_state: Any,
) -> ProcessDescriptor:
    """Build a process descriptor stamped with the current epoch milliseconds."""
    return ProcessDescriptor(
        type=app_type,
        window_state=window_state,
        app_state=app_state,
        timestamp=epoch_millis(),
    )
