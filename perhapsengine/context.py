"""The application window and its OpenGL context."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional

logger = logging.getLogger(__name__)

WindowFactory = Callable[[int, int, str], Any]


class ContextError(RuntimeError):
    """Raised when the window cannot be created or is not available."""


def _open_pyglet_window(width: int, height: int, title: str) -> Any:
    import pyglet

    config = pyglet.gl.Config(
        major_version=4,
        minor_version=2,
        forward_compatible=True,
        double_buffer=True,
        depth_size=24,
        sample_buffers=1,
        samples=4,
    )
    window = pyglet.window.Window(
        width, height, caption=title, config=config, resizable=True
    )
    info = pyglet.gl.gl_info
    logger.info(
        "----- System info -----\n"
        "Video Card: %s\nVendor: %s\nOpenGL version: %s\n"
        "-----------------------",
        info.get_renderer(),
        info.get_vendor(),
        info.get_version(),
    )
    return window


class Context:
    """Owns the main window and tracks its current dimensions."""

    def __init__(self, window_factory: Optional[WindowFactory] = None) -> None:
        self._window_factory = window_factory or _open_pyglet_window
        self._window: Any = None
        self._dimensions = (0.0, 0.0)

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._window is not None:
            self.terminate()

    @property
    def window(self) -> Any:
        """The main window, or None before create_context."""
        return self._window

    @property
    def dimensions(self) -> tuple[float, float]:
        """Current window width and height."""
        return self._dimensions

    def _require_window(self) -> Any:
        if self._window is None:
            raise ContextError("no window has been created")
        return self._window

    def create_context(self, screen_width: int, screen_height: int, title: str) -> None:
        """Open the main window; raises ContextError if that fails."""
        try:
            window = self._window_factory(screen_width, screen_height, title)
        except Exception as exc:
            raise ContextError(f"failed to create a window: {exc}") from exc
        self._window = window
        self._dimensions = (float(screen_width), float(screen_height))
        window.push_handlers(on_resize=self.on_resize)
        self.request_attention()

    def window_should_close(self) -> bool:
        return bool(self._require_window().has_exit)

    def terminate(self) -> None:
        """Close the window and release it."""
        self._require_window().close()
        self._window = None

    def swap_buffers(self) -> None:
        self._require_window().flip()

    def on_resize(self, width: int, height: int) -> None:
        """Record the new window size."""
        self._dimensions = (float(width), float(height))

    def request_attention(self) -> None:
        self._require_window().activate()