"""Session error taxonomy."""

from __future__ import annotations


class SessionError(Exception):
    """Base class for all session capture/restore errors."""


class ValidationError(SessionError):
    """Manifest shape, version or session id is not acceptable."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ConfigurationError(SessionError):
    """Invalid serializer registration or configuration file."""


class SessionNotFoundError(SessionError, LookupError):
    """No persisted record exists for the requested session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class CorruptDataError(SessionError):
    """A persisted record does not decode into a valid manifest."""


class StorageError(SessionError):
    """I/O failure while persisting, loading or listing records."""
