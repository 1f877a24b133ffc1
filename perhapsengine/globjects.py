"""OpenGL object handles: textures, cube maps and framebuffers.

Every GL call goes through a backend object. The default backend talks to
OpenGL through pyglet; another can be installed with ``set_backend``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Optional

GL_TEXTURE_2D = 0x0DE1
GL_TEXTURE_CUBE_MAP = 0x8513
GL_RGB = 0x1907
GL_RGBA = 0x1908
GL_UNSIGNED_BYTE = 0x1401
GL_FLOAT = 0x1406
GL_DEPTH_COMPONENT = 0x1902
GL_DEPTH_COMPONENT32 = 0x81A7
GL_COLOR_ATTACHMENT0 = 0x8CE0
GL_DEPTH_ATTACHMENT = 0x8D00
GL_TEXTURE_MAG_FILTER = 0x2800
GL_TEXTURE_MIN_FILTER = 0x2801
GL_LINEAR = 0x2601
GL_VERTEX_SHADER = 0x8B31
GL_FRAGMENT_SHADER = 0x8B30
GL_GEOMETRY_SHADER = 0x8DD9

MAX_TEXTURE_SLOT = 29


class PygletGL:
    """Backend issuing real OpenGL calls through pyglet."""

    def __init__(self) -> None:
        import pyglet.gl

        self._gl = pyglet.gl
        self._shaders: dict[int, Any] = {}

    def _gen(self, func: Callable[..., Any]) -> int:
        ids = (self._gl.GLuint * 1)()
        func(1, ids)
        return int(ids[0])

    def active_texture(self, slot: int) -> None:
        self._gl.glActiveTexture(self._gl.GL_TEXTURE0 + slot)

    def bind_texture(self, target: int, texture_id: int) -> None:
        self._gl.glBindTexture(target, texture_id)

    def gen_texture(self) -> int:
        return self._gen(self._gl.glGenTextures)

    def tex_image_2d(self, target, internal_format, width, height, fmt, data_type, data) -> None:
        self._gl.glTexImage2D(
            target, 0, internal_format, int(width), int(height), 0, fmt, data_type, data
        )

    def tex_parameter(self, target: int, name: int, value: float) -> None:
        if isinstance(value, float):
            self._gl.glTexParameterf(target, name, value)
        else:
            self._gl.glTexParameteri(target, name, value)

    def generate_mipmap(self, target: int) -> None:
        self._gl.glGenerateMipmap(target)

    def gen_framebuffer(self) -> int:
        return self._gen(self._gl.glGenFramebuffers)

    def bind_framebuffer(self, framebuffer_id: int) -> None:
        self._gl.glBindFramebuffer(self._gl.GL_FRAMEBUFFER, framebuffer_id)

    def draw_buffer(self, attachment: int) -> None:
        self._gl.glDrawBuffer(attachment)

    def viewport(self, x: float, y: float, width: float, height: float) -> None:
        self._gl.glViewport(int(x), int(y), int(width), int(height))

    def framebuffer_complete(self) -> bool:
        status = self._gl.glCheckFramebufferStatus(self._gl.GL_FRAMEBUFFER)
        return status == self._gl.GL_FRAMEBUFFER_COMPLETE

    def framebuffer_texture_2d(self, attachment: int, texture_id: int) -> None:
        self._gl.glFramebufferTexture2D(
            self._gl.GL_FRAMEBUFFER, attachment, GL_TEXTURE_2D, texture_id, 0
        )

    def framebuffer_texture(self, attachment: int, texture_id: int) -> None:
        self._gl.glFramebufferTexture(self._gl.GL_FRAMEBUFFER, attachment, texture_id, 0)

    def gen_vertex_array(self) -> int:
        return self._gen(self._gl.glGenVertexArrays)

    def bind_vertex_array(self, vao: int) -> None:
        self._gl.glBindVertexArray(vao)

    def gen_buffer(self) -> int:
        return self._gen(self._gl.glGenBuffers)

    def bind_array_buffer(self, vbo: int) -> None:
        self._gl.glBindBuffer(self._gl.GL_ARRAY_BUFFER, vbo)

    def bind_element_buffer(self, ebo: int) -> None:
        self._gl.glBindBuffer(self._gl.GL_ELEMENT_ARRAY_BUFFER, ebo)

    def array_buffer_data(self, values: Sequence[float]) -> None:
        data = (self._gl.GLfloat * len(values))(*values)
        self._gl.glBufferData(
            self._gl.GL_ARRAY_BUFFER, 4 * len(values), data, self._gl.GL_STATIC_DRAW
        )

    def element_buffer_data(self, values: Sequence[int]) -> None:
        data = (self._gl.GLuint * len(values))(*values)
        self._gl.glBufferData(
            self._gl.GL_ELEMENT_ARRAY_BUFFER, 4 * len(values), data, self._gl.GL_STATIC_DRAW
        )

    def vertex_attrib_pointer(self, index: int, size: int) -> None:
        self._gl.glVertexAttribPointer(index, size, GL_FLOAT, self._gl.GL_FALSE, 4 * size, 0)
        self._gl.glEnableVertexAttribArray(index)

    def draw_elements(self, count: int) -> None:
        self._gl.glDrawElements(self._gl.GL_TRIANGLES, count, self._gl.GL_UNSIGNED_INT, 0)

    def draw_arrays(self, count: int) -> None:
        self._gl.glDrawArrays(self._gl.GL_TRIANGLES, 0, count)

    def compile_shader(self, kind: int, source: str) -> tuple[int, Optional[str]]:
        from pyglet.graphics.shader import Shader, ShaderException

        names = {
            GL_VERTEX_SHADER: "vertex",
            GL_FRAGMENT_SHADER: "fragment",
            GL_GEOMETRY_SHADER: "geometry",
        }
        try:
            shader = Shader(source, names[kind])
        except ShaderException as exc:
            return 0, str(exc)
        self._shaders[shader.id] = shader
        return shader.id, None

    def delete_shader(self, shader_id: int) -> None:
        shader = self._shaders.pop(shader_id, None)
        if shader is not None:
            shader.delete()

    def create_program(self) -> int:
        return int(self._gl.glCreateProgram())

    def attach_shader(self, program_id: int, shader_id: int) -> None:
        self._gl.glAttachShader(program_id, shader_id)

    def link_program(self, program_id: int) -> None:
        self._gl.glLinkProgram(program_id)
        self._gl.glValidateProgram(program_id)

    def use_program(self, program_id: int) -> None:
        self._gl.glUseProgram(program_id)

    def uniform_location(self, program_id: int, name: str) -> int:
        return int(self._gl.glGetUniformLocation(program_id, name.encode()))

    def uniform(self, location: int, kind: str, values: Sequence[float]) -> None:
        getattr(self._gl, f"glUniform{kind}")(location, *values)

    def uniform_matrix(self, location: int, size: int, values: Sequence[float]) -> None:
        data = (self._gl.GLfloat * len(values))(*values)
        getattr(self._gl, f"glUniformMatrix{size}fv")(location, 1, self._gl.GL_FALSE, data)


_backend: Any = None


def get_backend() -> Any:
    """Return the active GL backend, creating the pyglet one on first use."""
    global _backend
    if _backend is None:
        _backend = PygletGL()
    return _backend


def set_backend(backend: Any) -> Any:
    """Install ``backend`` for all GL calls and return the previous one."""
    global _backend
    previous = _backend
    _backend = backend
    return previous


def _check_slot(slot: int) -> None:
    if not 0 <= slot <= MAX_TEXTURE_SLOT:
        raise ValueError(f"{slot} slot is invalid")


class GLObject:
    """An OpenGL object identified by its id."""

    def __init__(self, object_id: int = 0) -> None:
        self.id = object_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.id == self.id

    def __hash__(self) -> int:
        return hash((type(self), self.id))


class GLTexture(GLObject):
    """A 2D texture."""

    def bind_texture_2d(self, slot: int) -> None:
        _check_slot(slot)
        gl = get_backend()
        gl.active_texture(slot)
        gl.bind_texture(GL_TEXTURE_2D, self.id)

    @staticmethod
    def unbind() -> None:
        gl = get_backend()
        gl.active_texture(0)
        gl.bind_texture(GL_TEXTURE_2D, 0)


class GLCubeMap(GLObject):
    """A cube map texture."""

    def bind_cubemap(self, slot: int) -> None:
        _check_slot(slot)
        gl = get_backend()
        gl.active_texture(slot)
        gl.bind_texture(GL_TEXTURE_CUBE_MAP, self.id)


class FBO(GLObject):
    """A framebuffer with optional color and depth texture attachments."""

    def __init__(
        self,
        width: float,
        height: float,
        screen_dimensions: Callable[[], tuple[float, float]],
    ) -> None:
        super().__init__()
        self.width = width
        self.height = height
        self._screen_dimensions = screen_dimensions
        self.color_texture = GLTexture()
        self.depth_texture = GLTexture()
        self.gen_fbo()

    def gen_fbo(self) -> None:
        self.id = get_backend().gen_framebuffer()

    def fbo_complete(self) -> bool:
        self.bind()
        complete = bool(get_backend().framebuffer_complete())
        FBO.unbind(self._screen_dimensions())
        return complete

    def bind(self) -> None:
        gl = get_backend()
        gl.bind_texture(GL_TEXTURE_2D, 0)
        gl.bind_framebuffer(self.id)
        gl.draw_buffer(GL_COLOR_ATTACHMENT0)
        gl.viewport(0, 0, self.width, self.height)

    def _attach(self, internal_format: int, fmt: int, data_type: int) -> int:
        gl = get_backend()
        texture_id = gl.gen_texture()
        gl.bind_texture(GL_TEXTURE_2D, texture_id)
        gl.tex_image_2d(
            GL_TEXTURE_2D, internal_format, self.width, self.height, fmt, data_type, None
        )
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        return texture_id

    def gen_texture_attachment(self) -> None:
        self.bind()
        texture_id = self._attach(GL_RGB, GL_RGB, GL_UNSIGNED_BYTE)
        self.color_texture = GLTexture(texture_id)
        get_backend().framebuffer_texture_2d(GL_COLOR_ATTACHMENT0, texture_id)
        FBO.unbind(self._screen_dimensions())

    def gen_depth_texture_attachment(self) -> None:
        self.bind()
        texture_id = self._attach(GL_DEPTH_COMPONENT32, GL_DEPTH_COMPONENT, GL_FLOAT)
        self.depth_texture = GLTexture(texture_id)
        get_backend().framebuffer_texture(GL_DEPTH_ATTACHMENT, texture_id)
        FBO.unbind(self._screen_dimensions())

    @staticmethod
    def unbind(screen_dimensions: tuple[float, float]) -> None:
        """Bind the default framebuffer and restore the screen viewport."""
        gl = get_backend()
        gl.bind_framebuffer(0)
        width, height = screen_dimensions
        gl.viewport(0, 0, width, height)