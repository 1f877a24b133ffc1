"""Materials: a shader plus render state, kept in a registry by id."""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar, Optional

from .globjects import GLTexture, PygletGL, get_backend
from .shader import ShaderProgram

Callback = Callable[[], None]


def _set_cull_face(enabled: bool) -> None:
    gl = get_backend()
    if isinstance(gl, PygletGL):
        import pyglet.gl

        if enabled:
            pyglet.gl.glEnable(pyglet.gl.GL_CULL_FACE)
        else:
            pyglet.gl.glDisable(pyglet.gl.GL_CULL_FACE)
    else:
        gl.set_cull_face(enabled)


class Material:
    """A shader program with face culling and bind/unbind callbacks."""

    _pool: ClassVar[dict[str, "Material"]] = {}
    _ids: ClassVar[list[str]] = []
    _current: ClassVar[Optional["Material"]] = None

    def __init__(
        self, shader: Optional[ShaderProgram] = None, mat_id: Optional[str] = None
    ) -> None:
        self._shader: Optional[ShaderProgram] = None
        self.id: Optional[str] = None
        self.cull_back_face = True
        self._bind_callbacks: list[Callback] = []
        self._unbind_callbacks: list[Callback] = []
        if shader is not None and mat_id is not None:
            self._create_material(shader, mat_id)
        elif shader is not None:
            self._shader = shader

    def _create_material(self, shader: ShaderProgram, mat_id: str) -> None:
        if mat_id in Material._ids:
            raise ValueError(f'Material ID "{mat_id}" already exists.')
        self._shader = shader
        self.id = mat_id
        Material._ids.append(mat_id)
        Material._pool[mat_id] = self

    @property
    def shader(self) -> Optional[ShaderProgram]:
        return self._shader

    def _require_shader(self) -> ShaderProgram:
        if self._shader is None:
            raise RuntimeError("material has no shader")
        return self._shader

    def swap_shader(self, other_shader: ShaderProgram) -> None:
        self._shader = other_shader

    def submit_mvp(self, model, view, projection) -> None:
        """Send the model, view and projection matrices to the shader."""
        shader = self._require_shader()
        shader.set_mat4f("model", model)
        shader.set_mat4f("view", view)
        shader.set_mat4f("projection", projection)

    def bind(self) -> None:
        """Make this the current material, running its callbacks."""
        if Material._current is self:
            return
        shader = self._require_shader()
        if Material._current is not None:
            self.initiate_unbind_callbacks()
        shader.run_program()
        _set_cull_face(self.cull_back_face)
        self.apply_on_bind()
        Material._current = self
        self.initiate_bind_callbacks()

    @classmethod
    def get_material(cls, mat_id: str) -> Material:
        """Return the registered material with id ``mat_id``."""
        try:
            return Material._pool[mat_id]
        except KeyError:
            raise KeyError(f'Material by the ID "{mat_id}" does not exist.') from None

    @classmethod
    def get_material_ids(cls) -> list[str]:
        return list(Material._ids)

    @property
    def is_cull_face(self) -> bool:
        return self.cull_back_face

    def set_face_cull(self, value: bool) -> None:
        self.cull_back_face = bool(value)

    @classmethod
    def clean_up(cls) -> None:
        """Empty the registry of materials."""
        Material._pool.clear()
        Material._ids.clear()
        Material._current = None

    def subscribe_bind_callback(self, func: Callback) -> None:
        self._bind_callbacks.append(func)

    def subscribe_unbind_callback(self, func: Callback) -> None:
        self._unbind_callbacks.append(func)

    def initiate_unbind_callbacks(self) -> None:
        for callback in self._unbind_callbacks:
            callback()

    def initiate_bind_callbacks(self) -> None:
        for callback in self._bind_callbacks:
            callback()

    def apply_on_bind(self) -> None:
        """Hook for subclasses to bind their own resources."""


class TexturedMaterial(Material):
    """A material with 2D textures bound to consecutive slots."""

    def __init__(
        self, shader: Optional[ShaderProgram] = None, mat_id: Optional[str] = None
    ) -> None:
        super().__init__(shader, mat_id)
        self._textures: list[GLTexture] = []

    @property
    def textures(self) -> tuple[GLTexture, ...]:
        return tuple(self._textures)

    def add_texture(self, texture: GLTexture, uniform_name: Optional[str] = None) -> None:
        """Add a texture; its sampler uniform defaults to ``textureN`` for slot N."""
        shader = self._require_shader()
        shader.run_program()
        self._textures.append(texture)
        slot = len(self._textures) - 1
        name = uniform_name if uniform_name is not None else f"texture{slot}"
        shader.set_uniform1i(name, slot)

    def apply_on_bind(self) -> None:
        GLTexture.unbind()
        for slot, texture in enumerate(self._textures):
            texture.bind_texture_2d(slot)