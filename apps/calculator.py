"""Serializer for the calculator application."""

from __future__ import annotations

from typing import Any

from session.protocol import WindowState
from session.registry import AppSerializer

APP_TYPE = "calculator"


class CalculatorSerializer(AppSerializer):
    def serialize(self, window: Any) -> dict[str, Any]:
        state = window.app_state
        return {
            "displayValue": str(state.get("displayValue", "0")),
            "history": list(state.get("history", [])),
        }

    def deserialize(self, context: Any, window_state: WindowState, app_state: Any) -> Any:
        app_state = app_state or {}
        return context.windows.open(
            app_type=APP_TYPE,
            title=window_state.title or "Calculator",
            position=window_state.position,
            dimension=window_state.dimension,
            maximized=window_state.maximized,
            minimized=window_state.minimized,
            app_state={
                "displayValue": str(app_state.get("displayValue", "0")),
                "history": list(app_state.get("history", [])),
            },
        )
