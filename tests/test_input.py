import numpy as np
import pytest

from perhapsengine.context import Context, ContextError
from perhapsengine.input import Input, Key, MouseButton


class FakeWindow:
    def __init__(self, width, height, title):
        self.handlers = {}
        self.exclusive_calls = []
        self.has_exit = False

    def push_handlers(self, **handlers):
        self.handlers.update(handlers)

    def dispatch_events(self):
        pass

    def set_exclusive_mouse(self, flag):
        self.exclusive_calls.append(flag)

    def activate(self):
        pass


def fire(window, name, *args):
    window.handlers[name](*args)


@pytest.fixture
def rig():
    ctx = Context(window_factory=FakeWindow)
    ctx.create_context(640, 480, "input")
    inp = Input(ctx)
    inp.initialize()
    return inp, ctx.window


def test_get_key_follows_press_and_release(rig):
    inp, window = rig
    fire(window, "on_key_press", Key.W, 0)
    assert inp.get_key(Key.W) is True
    fire(window, "on_key_release", Key.W, 0)
    assert inp.get_key(Key.W) is False


def test_get_key_down_fires_once_per_press(rig):
    inp, window = rig
    fire(window, "on_key_press", Key.F1, 0)
    assert inp.get_key_down(Key.F1) is True
    assert inp.get_key_down(Key.F1) is False
    inp.update()
    assert inp.get_key_down(Key.F1) is False
    fire(window, "on_key_release", Key.F1, 0)
    inp.update()
    fire(window, "on_key_press", Key.F1, 0)
    assert inp.get_key_down(Key.F1) is True


def test_mouse_buttons(rig):
    inp, window = rig
    fire(window, "on_mouse_press", 5, 5, MouseButton.LEFT, 0)
    assert inp.get_mouse(MouseButton.LEFT) is True
    assert inp.get_mouse_down(MouseButton.LEFT) is True
    assert inp.get_mouse_down(MouseButton.LEFT) is False
    fire(window, "on_mouse_release", 5, 5, MouseButton.LEFT, 0)
    inp.update()
    assert inp.get_mouse(MouseButton.LEFT) is False
    fire(window, "on_mouse_press", 5, 5, MouseButton.LEFT, 0)
    assert inp.get_mouse_down(MouseButton.LEFT) is True


def test_wasd_vector_and_cancel(rig):
    inp, window = rig
    assert inp.get_wasd_vector().tolist() == [0.0, 0.0]
    fire(window, "on_key_press", Key.W, 0)
    fire(window, "on_key_press", Key.D, 0)
    assert inp.get_wasd_vector().tolist() == [1.0, 1.0]
    fire(window, "on_key_press", Key.S, 0)
    assert inp.get_wasd_vector().tolist() == [1.0, 0.0]


def test_wasd_arrow_keys(rig):
    inp, window = rig
    fire(window, "on_key_press", Key.DOWN, 0)
    fire(window, "on_key_press", Key.LEFT, 0)
    assert inp.get_wasd_vector().tolist() == [-1.0, -1.0]


def test_wasd_normalized_is_unit_length(rig):
    inp, window = rig
    assert inp.get_wasd_normalized().tolist() == [0.0, 0.0]
    fire(window, "on_key_press", Key.UP, 0)
    fire(window, "on_key_press", Key.A, 0)
    vec = inp.get_wasd_normalized()
    assert np.linalg.norm(vec) == pytest.approx(1.0)
    assert vec[0] == pytest.approx(-vec[1])


def test_scroll_delta_lasts_one_frame(rig):
    inp, window = rig
    fire(window, "on_mouse_scroll", 0, 0, 0, 2.5)
    assert inp.scroll_delta == 0.0
    inp.update()
    assert inp.scroll_delta == 2.5
    inp.update()
    assert inp.scroll_delta == 0.0


def test_mouse_delta_between_frames(rig):
    inp, window = rig
    fire(window, "on_mouse_enter", 10, 10)
    fire(window, "on_mouse_motion", 100, 240, 0, 0)
    inp.update()
    assert inp.mouse_delta.tolist() == [0.0, 0.0]
    assert inp.mouse_position.tolist() == [100.0, 240.0]
    fire(window, "on_mouse_motion", 130, 220, 30, -20)
    inp.update()
    assert inp.mouse_delta.tolist() == [30.0, 20.0]


def test_no_delta_when_cursor_outside(rig):
    inp, window = rig
    inp.update()
    fire(window, "on_mouse_motion", 100, 240, 0, 0)
    inp.update()
    assert inp.mouse_delta.tolist() == [0.0, 0.0]


def test_cursor_lock_centres_and_captures(rig):
    inp, window = rig
    fire(window, "on_mouse_enter", 10, 10)
    inp.update()
    assert window.exclusive_calls == [False]
    inp.cursor_lock(True)
    inp.update()
    assert window.exclusive_calls == [False, True]
    assert inp.mouse_position.tolist() == [320.0, 240.0]
    assert inp.mouse_delta.tolist() == [0.0, 0.0]
    fire(window, "on_mouse_motion", 0, 0, 5, 3)
    inp.update()
    assert inp.mouse_delta.tolist() == [5.0, -3.0]


def test_losing_focus_releases_cursor(rig):
    inp, window = rig
    fire(window, "on_mouse_enter", 10, 10)
    inp.update()
    inp.cursor_lock(True)
    inp.update()
    fire(window, "on_deactivate")
    inp.update()
    assert inp.is_focused is False
    assert window.exclusive_calls[-1] is False


def test_clamped_mouse_pos(rig):
    inp, window = rig
    fire(window, "on_mouse_motion", 700, 500, 0, 0)
    inp.update()
    assert inp.get_clamped_mouse_pos().tolist() == [640.0, 0.0]
    fire(window, "on_mouse_motion", -5, -100, 0, 0)
    inp.update()
    assert inp.get_clamped_mouse_pos().tolist() == [0.0, 480.0]


def test_screen_dimensions_follow_context(rig):
    inp, window = rig
    fire(window, "on_resize", 800, 600)
    assert inp.screen_dimensions == (800.0, 600.0)


def test_initialize_without_window_raises():
    inp = Input(Context(window_factory=FakeWindow))
    with pytest.raises(ContextError):
        inp.initialize()