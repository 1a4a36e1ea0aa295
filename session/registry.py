"""Per-application serializer registry."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from session.errors import ConfigurationError

SerializeFn = Callable[[Any], Any]
DeserializeFn = Callable[[Any, Any, Any], Any]

logger = logging.getLogger("ds.registry")


class AppSerializer(ABC):
    """Base class for app-type serializers."""

    @abstractmethod
    def serialize(self, window: Any) -> Any:
        """Return the opaque app state for a live window handle."""

    @abstractmethod
    def deserialize(self, context: Any, window_state: Any, app_state: Any) -> Any:
        """Recreate a window from stored state. May return an awaitable."""


@dataclass(frozen=True)
class SerializerRegistration:
    """Validated capability pair bound to one app type."""

    type: str
    serialize: SerializeFn
    deserialize: DeserializeFn


def _capability(serializer: Any, name: str) -> Any:
    if isinstance(serializer, Mapping):
        return serializer.get(name)
    return getattr(serializer, name, None)


class SerializerRegistry:
    """Maps app-type tags to serializer registrations."""

    def __init__(self) -> None:
        self._serializers: dict[str, SerializerRegistration] = {}

    def register(self, app_type: str, serializer: Any) -> SerializerRegistration:
        """Register a serializer object or mapping; the last registration wins."""
        serialize = _capability(serializer, "serialize")
        deserialize = _capability(serializer, "deserialize")
        if not callable(serialize) or not callable(deserialize):
            raise ConfigurationError(
                f"Invalid serializer for type {app_type}: must have serialize() and deserialize() methods"
            )
        if app_type in self._serializers:
            logger.info("Replacing serializer for app type %s", app_type)
        registration = SerializerRegistration(
            type=app_type,
            serialize=serialize,
            deserialize=deserialize,
        )
        self._serializers[app_type] = registration
        return registration

    def lookup(self, app_type: str) -> SerializerRegistration | None:
        return self._serializers.get(app_type)

    def types(self) -> list[str]:
        return sorted(self._serializers)

    def __contains__(self, app_type: object) -> bool:
        return app_type in self._serializers
