"""A small debug overlay showing frame statistics, with wireframe and vsync toggles."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any, Optional

from .context import Context, ContextError
from .mathutils import format_vec

WIREFRAME_BUTTON = "WireFrame"
VSYNC_BUTTON = "Vsync"
_TITLE = "Debug Info"
_MARGIN = 10
_LINE_HEIGHT = 18

OverlayFactory = Callable[[Any], Any]


def _pyglet_wireframe(enabled: bool) -> None:
    import pyglet.gl as gl

    gl.glPolygonMode(gl.GL_FRONT_AND_BACK, gl.GL_LINE if enabled else gl.GL_FILL)


class _PygletOverlay:
    """Text lines and clickable button labels drawn in the window's corner."""

    def __init__(self, window: Any) -> None:
        import pyglet

        self._pyglet = pyglet
        self._window = window
        self._batch = pyglet.graphics.Batch()
        self._labels: list[Any] = []
        self._buttons: dict[str, tuple[float, float, float, float]] = {}
        self._clicks: list[str] = []
        window.push_handlers(on_mouse_press=self._on_mouse_press)

    def _label(self, text: str, y: float) -> Any:
        label = self._pyglet.text.Label(
            text,
            x=_MARGIN,
            y=y,
            anchor_y="top",
            color=(0, 0, 0, 255),
            batch=self._batch,
        )
        self._labels.append(label)
        return label

    def show(self, lines: Sequence[str], buttons: Sequence[str]) -> None:
        for label in self._labels:
            label.delete()
        self._labels = []
        self._buttons = {}
        y = self._window.height - _MARGIN
        for line in (_TITLE, *lines):
            self._label(line, y)
            y -= _LINE_HEIGHT
        for name in buttons:
            label = self._label(f"[{name}]", y)
            self._buttons[name] = (
                label.x,
                y - label.content_height,
                label.x + label.content_width,
                y,
            )
            y -= _LINE_HEIGHT

    def _on_mouse_press(self, x, y, button, modifiers) -> None:
        for name, (x0, y0, x1, y1) in self._buttons.items():
            if x0 <= x <= x1 and y0 <= y <= y1:
                self._clicks.append(name)

    def take_clicks(self) -> list[str]:
        clicks, self._clicks = self._clicks, []
        return clicks

    def draw(self) -> None:
        self._batch.draw()

    def delete(self) -> None:
        for label in self._labels:
            label.delete()
        self._labels = []
        self._window.remove_handlers(on_mouse_press=self._on_mouse_press)


class ImmediateGUI:
    """Per-frame debug panel: resolution, average FPS and delta, camera position."""

    def __init__(
        self,
        context: Context,
        avg_delta: Callable[[], float],
        camera_position: Callable[[], Sequence[float]],
        *,
        set_wireframe: Optional[Callable[[bool], None]] = None,
        set_vsync: Optional[Callable[[bool], None]] = None,
        overlay_factory: Optional[OverlayFactory] = None,
    ) -> None:
        self._context = context
        self._avg_delta = avg_delta
        self._camera_position = camera_position
        self._set_wireframe = set_wireframe or _pyglet_wireframe
        self._set_vsync = set_vsync or self._window_vsync
        self._overlay_factory = overlay_factory or _PygletOverlay
        self._overlay: Any = None
        self.glsl_version: Optional[str] = None
        self.wireframe = False
        self.vsync = True

    def _window_vsync(self, enabled: bool) -> None:
        window = self._context.window
        if window is None:
            raise ContextError("no window has been created")
        window.set_vsync(enabled)

    def _require_overlay(self) -> Any:
        if self._overlay is None:
            raise RuntimeError("the GUI has not been initialized")
        return self._overlay

    def initialize(self, glsl_version: str) -> None:
        """Attach the overlay to the context's window."""
        window = self._context.window
        if window is None:
            raise ContextError("no window has been created")
        self.glsl_version = glsl_version
        self._overlay = self._overlay_factory(window)

    def begin_frame(self) -> None:
        """Start a frame; clicks from before it are kept for render."""
        self._require_overlay()

    def end_frame(self) -> None:
        self._require_overlay().draw()

    def debug_lines(self) -> list[str]:
        """The text lines of the debug panel."""
        width, height = self._context.dimensions
        avg = float(self._avg_delta())
        fps = math.inf if avg == 0 else 1 / avg
        return [
            f"Current Resolution: {width:g}x{height:g}",
            f"Avg FPS: {fps:f}",
            f"Avg Delta: {avg:f}",
            f"CamPos: {format_vec(self._camera_position())}",
        ]

    def toggle_wireframe(self) -> bool:
        """Switch wireframe rendering and return the new state."""
        self.wireframe = not self.wireframe
        self._set_wireframe(self.wireframe)
        return self.wireframe

    def toggle_vsync(self) -> bool:
        """Switch vertical sync and return the new state."""
        self.vsync = not self.vsync
        self._set_vsync(self.vsync)
        return self.vsync

    def render(self) -> None:
        """Refresh the panel and act on button clicks."""
        overlay = self._require_overlay()
        overlay.show(self.debug_lines(), (WIREFRAME_BUTTON, VSYNC_BUTTON))
        for name in overlay.take_clicks():
            if name == WIREFRAME_BUTTON:
                self.toggle_wireframe()
            elif name == VSYNC_BUTTON:
                self.toggle_vsync()

    def clean_up(self) -> None:
        self._require_overlay().delete()
        self._overlay = None