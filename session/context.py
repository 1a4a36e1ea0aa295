"""Holder for the single active session manifest."""

from __future__ import annotations

from typing import NamedTuple

from session.protocol import SessionManifest


class _Active(NamedTuple):
    session_id: str
    manifest: SessionManifest


class ActiveSession:
    """Reference to the most recently saved or loaded manifest.

    Replacement is a single attribute assignment, so readers that grab
    ``current`` once always see one complete manifest.
    """

    def __init__(self) -> None:
        self._active: _Active | None = None

    @property
    def current(self) -> SessionManifest | None:
        active = self._active
        return active.manifest if active else None

    @property
    def session_id(self) -> str | None:
        active = self._active
        return active.session_id if active else None

    def activate(self, session_id: str, manifest: SessionManifest) -> None:
        self._active = _Active(session_id, manifest)
