"""A stand-alone renderer that draws a cube-mapped skybox around the camera."""

from __future__ import annotations

import math
import os
from typing import Any, Optional, Union

import numpy as np

from .globjects import PygletGL, get_backend
from .loader import Loader
from .material import Material
from .mathutils import normalize, rotate
from .shader import ShaderProgram
from .transform import Transform

PathLike = Union[str, os.PathLike]

GL_LESS = 0x0201
GL_LEQUAL = 0x0203

_YAW_SPEED = 5.0
_YAW_AXIS = (1.0, 1.0, 1.0)


def _set_depth_func(func: int) -> None:
    gl = get_backend()
    if isinstance(gl, PygletGL):
        import pyglet.gl

        pyglet.gl.glDepthFunc(func)
    else:
        gl.depth_func(func)


class SkyboxRenderer:
    """Draws a slowly rotating cube map behind everything else."""

    def __init__(
        self,
        cube_folder_path: PathLike,
        clock: Any,
        *,
        loader: Optional[Loader] = None,
        model_path: PathLike = "project/assets/models/cube.glb",
        vertex_path: PathLike = "project/assets/shaders/skybox.vert",
        fragment_path: PathLike = "project/assets/shaders/skybox.frag",
        material_id: str = "skyboxMat",
    ) -> None:
        loader = loader or Loader()
        self._clock = clock
        self.transform = Transform()
        self.cam: Any = None
        self.yaw = 0.0
        self.cube = loader.import_simple_model(model_path)
        program = ShaderProgram(vertex_path, fragment_path)
        self.material = Material(program, material_id)
        self.material.set_face_cull(False)
        self.cubemap = loader.load_cubemap(cube_folder_path)

    def rotate(self) -> None:
        """Advance the skybox's rotation by the last frame's duration."""
        self.yaw += self._clock.delta_time * _YAW_SPEED

    def render(self) -> None:
        """Draw the skybox with the camera's rotation but not its translation."""
        if self.cam is None:
            raise RuntimeError("skybox has no camera to render with")
        self.material.bind()

        view = np.identity(4)
        view[:3, :3] = np.asarray(self.cam.view_matrix, dtype=float)[:3, :3]
        model = rotate(np.identity(4), math.radians(self.yaw), normalize(_YAW_AXIS))

        shader = self.material.shader
        shader.set_mat4f("model", model)
        shader.set_mat4f("projection", self.cam.projection_matrix)
        shader.set_mat4f("view", view)
        self.cubemap.bind_cubemap(0)
        self.cube.bind()

        _set_depth_func(GL_LEQUAL)
        get_backend().draw_elements(self.cube.draw_count)
        _set_depth_func(GL_LESS)