"""In-process window registry."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from session.protocol import GENERIC_APP_TYPE


@dataclass
class WindowHandle:
    """Live window with chrome state and the owning app's internal state."""

    id: int
    title: str = ""
    position: dict[str, Any] = field(default_factory=lambda: {"left": 0, "top": 0})
    dimension: dict[str, Any] = field(default_factory=lambda: {"width": 640, "height": 480})
    maximized: bool = False
    minimized: bool = False
    z_index: int = 0
    app_type: str = GENERIC_APP_TYPE
    app_state: dict[str, Any] = field(default_factory=dict)


class WindowRegistry:
    """Tracks open windows in creation order."""

    def __init__(self) -> None:
        self._windows: dict[int, WindowHandle] = {}
        self._ids = itertools.count(1)
        self.logger = logging.getLogger("ds.windows")

    def open(
        self,
        app_type: str = GENERIC_APP_TYPE,
        title: str = "",
        position: dict[str, Any] | None = None,
        dimension: dict[str, Any] | None = None,
        maximized: bool = False,
        minimized: bool = False,
        app_state: dict[str, Any] | None = None,
    ) -> WindowHandle:
        """Open a window on top of the current stack."""
        window_id = next(self._ids)
        top = max((w.z_index for w in self._windows.values()), default=0)
        handle = WindowHandle(
            id=window_id,
            title=title,
            maximized=maximized,
            minimized=minimized,
            z_index=top + 1,
            app_type=app_type,
            app_state=dict(app_state or {}),
        )
        if position is not None:
            handle.position = dict(position)
        if dimension is not None:
            handle.dimension = dict(dimension)
        self._windows[window_id] = handle
        self.logger.debug("Opened window %s (%s)", window_id, app_type)
        return handle

    def __iter__(self) -> Iterator[WindowHandle]:
        return iter(list(self._windows.values()))
