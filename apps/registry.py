"""Default serializer wiring for bundled applications."""

from __future__ import annotations

from typing import Any

from apps.calculator import APP_TYPE as CALCULATOR
from apps.calculator import CalculatorSerializer
from apps.text_editor import APP_TYPE as TEXT_EDITOR
from apps.text_editor import TextEditorSerializer
from session.registry import AppSerializer, SerializerRegistry


def _app_enabled(config: dict[str, Any], app_type: str, default: bool) -> bool:
    apps_cfg = config.get("apps", {})
    app_cfg = apps_cfg.get(app_type, {})
    if not isinstance(app_cfg, dict):
        return default
    return bool(app_cfg.get("enabled", default))


def build_default_registry(config: dict[str, Any]) -> SerializerRegistry:
    """Register bundled serializers that are enabled in config."""
    registry = SerializerRegistry()
    bundled: dict[str, AppSerializer] = {
        TEXT_EDITOR: TextEditorSerializer(),
        CALCULATOR: CalculatorSerializer(),
    }
    for app_type, serializer in bundled.items():
        if _app_enabled(config, app_type, True):
            registry.register(app_type, serializer)
    return registry
