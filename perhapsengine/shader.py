"""Shader stages loaded from files and linked shader programs."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar, Optional, Sequence, Union

import numpy as np

from .globjects import (
    GL_FRAGMENT_SHADER,
    GL_GEOMETRY_SHADER,
    GL_VERTEX_SHADER,
    GLObject,
    get_backend,
)

logger = logging.getLogger(__name__)

_EXTENSIONS = (
    (".vert", GL_VERTEX_SHADER),
    (".frag", GL_FRAGMENT_SHADER),
    (".geom", GL_GEOMETRY_SHADER),
)
_TYPE_NAMES = {
    GL_VERTEX_SHADER: "Vertex",
    GL_FRAGMENT_SHADER: "Fragment",
    GL_GEOMETRY_SHADER: "Geometry",
}

PathLike = Union[str, os.PathLike]


class ShaderError(RuntimeError):
    """Raised for unsupported shader files and compile failures."""


class Shader(GLObject):
    """One compiled shader stage; the type follows the file extension."""

    def __init__(self, filepath: PathLike) -> None:
        super().__init__()
        self.shader_type = 0
        self.parse_shader(filepath)

    def parse_shader(self, filepath: PathLike) -> None:
        """Read, type and compile the shader at ``filepath``."""
        path = str(filepath)
        if not Path(path).is_file():
            raise FileNotFoundError(f"could not open shader path: {path}")
        shader_type = next((kind for ext, kind in _EXTENSIONS if ext in path), None)
        if shader_type is None:
            raise ShaderError(
                f"'{path}' is not a supported shader filetype. "
                "it must be of type .vert, .frag or .geom"
            )
        self.shader_type = shader_type
        with open(path, encoding="utf-8") as handle:
            source = "".join(line.rstrip("\n") + "\n" for line in handle)
        gl = get_backend()
        shader_id, error = gl.compile_shader(shader_type, source)
        self.id = shader_id
        if error is not None:
            if shader_id:
                gl.delete_shader(shader_id)
            raise ShaderError(
                f"failed to compile {_TYPE_NAMES[shader_type]} shader {path}:\n{error}"
            )

    def delete(self) -> None:
        get_backend().delete_shader(self.id)


class ShaderProgram(GLObject):
    """A linked program with a cache of uniform locations."""

    _active: ClassVar[Optional["ShaderProgram"]] = None

    def __init__(
        self,
        vertex: Union[PathLike, Shader, None] = None,
        fragment: Union[PathLike, Shader, None] = None,
    ) -> None:
        super().__init__(get_backend().create_program())
        self._uniform_cache: dict[str, int] = {}
        self.suppressed = False
        if vertex is None or fragment is None:
            return
        owned = []
        stages = []
        for stage in (vertex, fragment):
            if isinstance(stage, Shader):
                stages.append(stage)
            else:
                shader = Shader(stage)
                owned.append(shader)
                stages.append(shader)
        self.run_program()
        for shader in stages:
            self.attach_shader(shader)
        self.link_program()
        for shader in owned:
            shader.delete()
        ShaderProgram.unbind()

    def link_program(self) -> None:
        get_backend().link_program(self.id)

    def run_program(self) -> None:
        if ShaderProgram._active is self:
            return
        ShaderProgram._active = self
        get_backend().use_program(self.id)

    def attach_shader(self, shader: Shader) -> None:
        get_backend().attach_shader(self.id, shader.id)

    @staticmethod
    def unbind_program() -> None:
        get_backend().use_program(0)

    def suppress_errors(self, value: bool) -> None:
        self.suppressed = bool(value)

    def is_active(self) -> bool:
        return ShaderProgram._active is self

    def get_uniform_location(self, name: str) -> int:
        """Look up a uniform, caching found locations; -1 means it does not exist."""
        cached = self._uniform_cache.get(name)
        if cached is not None:
            return cached
        location = get_backend().uniform_location(self.id, name)
        if location == -1:
            if not self.suppressed:
                logger.warning("'%s' Uniform doesnt exist", name)
        else:
            self._uniform_cache[name] = location
        return location

    def _set(self, name: str, kind: str, values: Sequence[float]) -> None:
        self.run_program()
        get_backend().uniform(self.get_uniform_location(name), kind, tuple(values))

    def _set_matrix(self, name: str, size: int, matrix) -> None:
        m = np.asarray(matrix, dtype=float)
        if m.shape != (size, size):
            raise ValueError(f"expected a {size}x{size} matrix, got shape {m.shape}")
        self.run_program()
        column_major = tuple(float(v) for v in m.T.flatten())
        get_backend().uniform_matrix(self.get_uniform_location(name), size, column_major)

    def set_uniform3f(self, name: str, value: Sequence[float]) -> None:
        self._set(name, "3f", [float(v) for v in list(value)[:3]])

    def set_mat4f(self, name: str, matrix) -> None:
        self._set_matrix(name, 4, matrix)

    def set_mat3f(self, name: str, matrix) -> None:
        self._set_matrix(name, 3, matrix)

    def set_uniform4f(self, name: str, value: Sequence[float]) -> None:
        self._set(name, "4f", [float(v) for v in list(value)[:4]])

    def set_uniform1i(self, name: str, value: int) -> None:
        self._set(name, "1i", (int(value),))

    def set_uniform1f(self, name: str, value: float) -> None:
        self._set(name, "1f", (float(value),))

    def set_uniform2f(self, name: str, value: Sequence[float]) -> None:
        self._set(name, "2f", [float(v) for v in list(value)[:2]])

    @staticmethod
    def unbind() -> None:
        """Forget the active program and bind none."""
        ShaderProgram._active = None
        get_backend().use_program(0)