"""Serializer for the text editor application."""

from __future__ import annotations

from typing import Any

from session.protocol import WindowState
from session.registry import AppSerializer

APP_TYPE = "text-editor"


class TextEditorSerializer(AppSerializer):
    """Keeps the buffer text and cursor offset of an editor window."""

    def serialize(self, window: Any) -> dict[str, Any]:
        state = window.app_state
        return {
            "content": str(state.get("content", "")),
            "cursorPosition": int(state.get("cursorPosition", 0)),
        }

    def deserialize(self, context: Any, window_state: WindowState, app_state: Any) -> Any:
        app_state = app_state or {}
        content = str(app_state.get("content", ""))
        cursor = min(max(int(app_state.get("cursorPosition", 0)), 0), len(content))
        return context.windows.open(
            app_type=APP_TYPE,
            title=window_state.title or "Untitled",
            position=window_state.position,
            dimension=window_state.dimension,
            maximized=window_state.maximized,
            minimized=window_state.minimized,
            app_state={"content": content, "cursorPosition": cursor},
        )
