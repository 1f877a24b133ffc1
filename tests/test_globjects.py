import pytest

from perhapsengine import globjects
from perhapsengine.globjects import (
    FBO,
    GL_COLOR_ATTACHMENT0,
    GL_DEPTH_ATTACHMENT,
    GL_TEXTURE_2D,
    GL_TEXTURE_CUBE_MAP,
    GLCubeMap,
    GLTexture,
)


class FakeGL:
    def __init__(self):
        self.calls = []
        self.next_id = 0
        self.complete = True

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))
            if name.startswith("gen_"):
                self.next_id += 1
                return self.next_id
            if name == "framebuffer_complete":
                return self.complete
            return None

        return record

    def names(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def gl():
    fake = FakeGL()
    previous = globjects.set_backend(fake)
    yield fake
    globjects.set_backend(previous)


def test_bind_texture_2d(gl):
    GLTexture(7).bind_texture_2d(3)
    assert gl.calls == [("active_texture", (3,)), ("bind_texture", (GL_TEXTURE_2D, 7))]


@pytest.mark.parametrize("slot", [30, -1])
def test_invalid_slot_raises(gl, slot):
    with pytest.raises(ValueError):
        GLTexture(7).bind_texture_2d(slot)
    assert gl.calls == []


def test_texture_unbind(gl):
    GLTexture.unbind()
    assert gl.calls == [("active_texture", (0,)), ("bind_texture", (GL_TEXTURE_2D, 0))]


def test_cubemap_bind(gl):
    GLCubeMap(4).bind_cubemap(0)
    assert gl.calls[-1] == ("bind_texture", (GL_TEXTURE_CUBE_MAP, 4))
    with pytest.raises(ValueError):
        GLCubeMap(4).bind_cubemap(30)


def test_textures_compare_by_id():
    assert GLTexture(2) == GLTexture(2)
    assert GLTexture(2) != GLCubeMap(2)


def test_fbo_generates_framebuffer(gl):
    fbo = FBO(512, 512, lambda: (800, 600))
    assert fbo.id == 1
    assert gl.names() == ["gen_framebuffer"]


def test_fbo_color_attachment(gl):
    fbo = FBO(512, 256, lambda: (800, 600))
    fbo.gen_texture_attachment()
    assert fbo.color_texture == GLTexture(2)
    assert ("framebuffer_texture_2d", (GL_COLOR_ATTACHMENT0, 2)) in gl.calls
    assert ("viewport", (0, 0, 512, 256)) in gl.calls
    assert gl.calls[-1] == ("viewport", (0, 0, 800, 600))
    assert gl.calls[-2] == ("bind_framebuffer", (0,))


def test_fbo_depth_attachment(gl):
    fbo = FBO(64, 64, lambda: (100, 100))
    fbo.gen_depth_texture_attachment()
    assert fbo.depth_texture.id == 2
    assert ("framebuffer_texture", (GL_DEPTH_ATTACHMENT, 2)) in gl.calls


def test_fbo_complete_reports_status(gl):
    fbo = FBO(64, 64, lambda: (100, 100))
    assert fbo.fbo_complete() is True
    gl.complete = False
    assert fbo.fbo_complete() is False


def test_fbo_static_unbind(gl):
    FBO.unbind((320, 200))
    assert gl.calls == [("bind_framebuffer", (0,)), ("viewport", (0, 0, 320, 200))]