"""User settings collaborators."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import yaml

from session.errors import StorageError


class SettingsBackend(Protocol):
    def get(self) -> dict[str, Any] | None: ...

    def set(self, key: str, value: Any) -> None: ...


class SettingsStore:
    """In-memory settings mapping."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self) -> dict[str, Any]:
        return dict(self._values)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


class YamlSettingsStore(SettingsStore):
    """Settings persisted to a YAML file after every change."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.logger = logging.getLogger("ds.settings")
        super().__init__(self._load())

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise StorageError(f"Failed to read settings {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Settings file must contain a mapping: {self.path}")
        return data

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.path.open("w", encoding="utf-8") as fh:
                yaml.safe_dump(self._values, fh, sort_keys=True, allow_unicode=True)
        except OSError as exc:
            raise StorageError(f"Failed to write settings {self.path}: {exc}") from exc
        self.logger.debug("Persisted setting %s", key)
