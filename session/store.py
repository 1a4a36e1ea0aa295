"""File-backed session record store."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from session.context import ActiveSession
from session.errors import CorruptDataError, SessionNotFoundError, StorageError, ValidationError
from session.protocol import SessionManifest, decode_manifest, epoch_millis

SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]+")
RECORD_SUFFIX = ".json"


@dataclass(frozen=True)
class SavedSession:
    session_id: str
    path: Path


def check_session_id(session_id: str) -> str:
    if not SESSION_ID_PATTERN.fullmatch(session_id or "") or session_id.startswith("."):
        raise ValidationError(f"Invalid session id: {session_id!r}")
    return session_id


class SessionStore:
    """Persists manifests as pretty-printed JSON files, one per session id."""

    def __init__(self, sessions_dir: Path, active: ActiveSession | None = None) -> None:
        self.sessions_dir = sessions_dir
        self.active = active if active is not None else ActiveSession()
        self.logger = logging.getLogger("ds.store")
        try:
            self.sessions_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self.logger.warning("Failed to create sessions directory %s: %s", sessions_dir, exc)

    def _record_path(self, session_id: str) -> Path:
        return self.sessions_dir / f"{check_session_id(session_id)}{RECORD_SUFFIX}"

    def save_session(self, session_id: str, manifest: SessionManifest | dict[str, Any]) -> SavedSession:
        """Write the full record for ``session_id`` and make it active."""
        path = self._record_path(session_id)
        decoded = decode_manifest(manifest)
        payload = decoded.to_json(indent=2)
        try:
            self.sessions_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.sessions_dir, prefix=f".{session_id}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to save session {session_id}: {exc}") from exc

        self.active.activate(session_id, decoded)
        self.logger.info("Saved session %s (%d bytes)", session_id, len(payload))
        return SavedSession(session_id=session_id, path=path)

    def import_session(self, manifest: SessionManifest | dict[str, Any]) -> SavedSession:
        """Save under a generated ``session-<epoch ms>`` id."""
        return self.save_session(f"session-{epoch_millis()}", manifest)

    def _read_record(self, session_id: str, path: Path) -> SessionManifest:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise SessionNotFoundError(session_id) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptDataError(f"Session {session_id} is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read session {session_id}: {exc}") from exc
        try:
            return decode_manifest(data)
        except ValidationError as exc:
            raise CorruptDataError(f"Session {session_id} is not a valid manifest: {exc.reason}") from exc

    def load_session(self, session_id: str) -> SessionManifest:
        """Read the record for ``session_id`` and make it active."""
        path = self._record_path(session_id)
        manifest = self._read_record(session_id, path)
        self.active.activate(session_id, manifest)
        self.logger.info("Loaded session %s", session_id)
        return manifest

    def list_sessions(self) -> list[dict[str, Any]]:
        """Summaries of every stored record.

        Reads each full record to extract its summary.
        """
        try:
            paths = sorted(p for p in self.sessions_dir.iterdir() if p.suffix == RECORD_SUFFIX)
        except OSError as exc:
            raise StorageError(f"Failed to list sessions in {self.sessions_dir}: {exc}") from exc

        sessions: list[dict[str, Any]] = []
        for path in paths:
            session_id = path.stem
            try:
                manifest = self._read_record(session_id, path)
            except (CorruptDataError, SessionNotFoundError) as exc:
                self.logger.warning("Skipping unreadable session %s: %s", session_id, exc)
                continue
            sessions.append(
                {
                    "id": session_id,
                    "timestamp": manifest.timestamp,
                    "metadata": manifest.metadata,
                }
            )
        return sessions
