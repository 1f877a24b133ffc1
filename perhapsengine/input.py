"""Keyboard and mouse state, polled once per frame."""

from __future__ import annotations

from enum import IntEnum

import numpy as np

from .context import Context, ContextError
from .mathutils import normalize


class Key(IntEnum):
    """Key symbols as reported by the window system."""

    A = 0x61
    D = 0x64
    S = 0x73
    W = 0x77
    F1 = 0xFFBE
    LEFT = 0xFF51
    UP = 0xFF52
    RIGHT = 0xFF53
    DOWN = 0xFF54
    LSHIFT = 0xFFE1


class MouseButton(IntEnum):
    LEFT = 1
    MIDDLE = 2
    RIGHT = 4


class Input:
    """Tracks pressed keys and buttons, cursor movement, scrolling and cursor locking."""

    def __init__(self, context: Context) -> None:
        self._context = context
        self._pressed_keys: set[int] = set()
        self._held_keys: set[int] = set()
        self._pressed_buttons: set[int] = set()
        self._held_buttons: set[int] = set()
        self._raw_cursor = (0.0, 0.0)
        self._mouse = (0.0, 0.0)
        self._mouse_delta = np.zeros(2)
        self._pending_scroll = 0.0
        self._scroll_delta = 0.0
        self._window_focused = True
        self._window_hovered = False
        self._focused = False
        self._cursor_in_window = False
        self._switched_lock = False
        self._should_lock = False
        self._cursor_free = False
        self._exclusive = False

    def _window(self):
        window = self._context.window
        if window is None:
            raise ContextError("no window has been created")
        return window

    def initialize(self) -> None:
        """Subscribe to the window's input events."""
        self._window().push_handlers(
            on_key_press=self._key_press,
            on_key_release=self._key_release,
            on_mouse_press=self._mouse_press,
            on_mouse_release=self._mouse_release,
            on_mouse_motion=self._mouse_motion,
            on_mouse_drag=self._mouse_drag,
            on_mouse_enter=self._mouse_enter,
            on_mouse_leave=self._mouse_leave,
            on_mouse_scroll=self._mouse_scroll,
            on_activate=self._activate,
            on_deactivate=self._deactivate,
        )

    def _key_press(self, symbol: int, modifiers: int) -> None:
        self._pressed_keys.add(symbol)

    def _key_release(self, symbol: int, modifiers: int) -> None:
        self._pressed_keys.discard(symbol)

    def _mouse_press(self, x: float, y: float, button: int, modifiers: int) -> None:
        self._pressed_buttons.add(button)

    def _mouse_release(self, x: float, y: float, button: int, modifiers: int) -> None:
        self._pressed_buttons.discard(button)

    def _mouse_motion(self, x: float, y: float, dx: float, dy: float) -> None:
        if self._exclusive:
            rx, ry = self._raw_cursor
            self._raw_cursor = (rx + dx, ry - dy)
        else:
            height = self._context.dimensions[1]
            self._raw_cursor = (float(x), height - float(y))

    def _mouse_drag(self, x, y, dx, dy, buttons, modifiers) -> None:
        self._mouse_motion(x, y, dx, dy)

    def _mouse_enter(self, x: float, y: float) -> None:
        self._window_hovered = True

    def _mouse_leave(self, x: float, y: float) -> None:
        self._window_hovered = False

    def _mouse_scroll(self, x, y, scroll_x, scroll_y) -> None:
        self.on_scroll(scroll_x, scroll_y)

    def _activate(self) -> None:
        self._window_focused = True

    def _deactivate(self) -> None:
        self._window_focused = False

    def on_scroll(self, x_offset: float, y_offset: float) -> None:
        """Record vertical scrolling; it shows in scroll_delta after the next update."""
        self._pending_scroll = float(y_offset)

    @property
    def mouse_delta(self) -> np.ndarray:
        """Cursor movement over the last frame."""
        return self._mouse_delta.copy()

    @property
    def mouse_position(self) -> np.ndarray:
        """Cursor position; it may exceed the window borders while locked."""
        return np.array(self._mouse, dtype=float)

    @property
    def scroll_delta(self) -> float:
        return self._scroll_delta

    @property
    def is_focused(self) -> bool:
        return self._focused

    @property
    def screen_dimensions(self) -> tuple[float, float]:
        return self._context.dimensions

    def get_key_down(self, key: int) -> bool:
        """True only on the first query while the key is pressed."""
        if key in self._pressed_keys and key not in self._held_keys:
            self._held_keys.add(key)
            return True
        return False

    def get_key(self, key: int) -> bool:
        return key in self._pressed_keys

    def get_mouse_down(self, button: int) -> bool:
        """True only on the first query while the button is pressed."""
        if button in self._pressed_buttons and button not in self._held_buttons:
            self._held_buttons.add(button)
            return True
        return False

    def get_mouse(self, button: int) -> bool:
        return button in self._pressed_buttons

    def cursor_lock(self, value: bool) -> None:
        """Ask for the cursor to be locked while the window is focused and hovered."""
        self._should_lock = bool(value)

    def _lock_cursor(self, state: bool) -> None:
        window = self._window()
        if state:
            if not self._cursor_free:
                return
            self._switched_lock = True
            width, height = self._context.dimensions
            self._raw_cursor = (width / 2, height / 2)
            window.set_exclusive_mouse(True)
            self._exclusive = True
            self._cursor_free = False
        else:
            if self._cursor_free:
                return
            self._switched_lock = True
            window.set_exclusive_mouse(False)
            self._exclusive = False
            self._cursor_free = True

    def update(self) -> None:
        """Poll events, release cached keys and buttons and compute the mouse delta."""
        window = self._window()
        self._scroll_delta = 0.0
        window.dispatch_events()
        self._scroll_delta = self._pending_scroll
        self._pending_scroll = 0.0

        self._focused = self._window_focused
        self._cursor_in_window = self._window_hovered

        if not self._focused:
            self._lock_cursor(False)
        elif self._should_lock and self._cursor_in_window:
            self._lock_cursor(True)
        else:
            self._lock_cursor(False)

        self._held_keys &= self._pressed_keys
        self._held_buttons &= self._pressed_buttons

        x, y = self._raw_cursor
        if self._cursor_in_window and not self._switched_lock and self._focused:
            self._mouse_delta = np.array([x - self._mouse[0], y - self._mouse[1]])
        else:
            self._mouse_delta = np.zeros(2)
            self._switched_lock = False
        self._mouse = (x, y)

    def _wasd(self) -> tuple[float, float]:
        forward = 0.0
        side = 0.0
        if self.get_key(Key.W) or self.get_key(Key.UP):
            forward += 1
        if self.get_key(Key.S) or self.get_key(Key.DOWN):
            forward -= 1
        if self.get_key(Key.D) or self.get_key(Key.RIGHT):
            side += 1
        if self.get_key(Key.A) or self.get_key(Key.LEFT):
            side -= 1
        return side, forward

    def get_wasd_vector(self) -> np.ndarray:
        """Movement vector (side, forward) from WASD or arrow keys, not normalized."""
        return np.array(self._wasd(), dtype=float)

    def get_wasd_normalized(self) -> np.ndarray:
        """Movement vector (side, forward), normalized unless it is zero."""
        side, forward = self._wasd()
        if side == 0 and forward == 0:
            return np.zeros(2)
        return normalize((side, forward))

    def get_clamped_mouse_pos(self) -> np.ndarray:
        """Cursor position clamped to the window's bounds."""
        width, height = self._context.dimensions
        x, y = self._mouse
        return np.array([min(max(x, 0.0), width), min(max(y, 0.0), height)])