"""Uploading vertex data, textures, cube maps, models and sounds."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
from PIL import Image as PILImage
from PIL import ImageOps

from .audio import AudioClip, AudioSystem
from .globjects import (
    GL_LINEAR,
    GL_RGB,
    GL_RGBA,
    GL_TEXTURE_2D,
    GL_TEXTURE_CUBE_MAP,
    GL_TEXTURE_MAG_FILTER,
    GL_TEXTURE_MIN_FILTER,
    GL_UNSIGNED_BYTE,
    GLCubeMap,
    GLTexture,
    get_backend,
)
from .model_importer import ModelImporter
from .rawmodel import RawModel

PathLike = Union[str, os.PathLike]
SoundFactory = Callable[[str, bool], Any]

GL_TEXTURE_WRAP_S = 0x2802
GL_TEXTURE_WRAP_T = 0x2803
GL_TEXTURE_WRAP_R = 0x8072
GL_REPEAT = 0x2901
GL_CLAMP_TO_EDGE = 0x812F
GL_LINEAR_MIPMAP_LINEAR = 0x2703
GL_TEXTURE_LOD_BIAS = 0x8501
GL_TEXTURE_CUBE_MAP_POSITIVE_X = 0x8515

CUBEMAP_FACES = (
    "right.png",
    "left.png",
    "top.png",
    "bottom.png",
    "front.png",
    "back.png",
)

_FORMATS = {"RGB": GL_RGB, "RGBA": GL_RGBA}


def _pyglet_sound(filepath: str, stream: bool) -> Any:
    import pyglet.media

    return pyglet.media.load(filepath, streaming=stream)


def _open_image(filepath: PathLike, flip_vertically: bool) -> PILImage.Image:
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"could not load image from filepath: {path}")
    with PILImage.open(path) as source:
        source.load()
        if source.mode == "P":
            image = source.convert("RGBA" if "transparency" in source.info else "RGB")
        else:
            image = source.copy()
    if flip_vertically:
        image = ImageOps.flip(image)
    return image


def _flatten(rows: Any) -> list[float]:
    return np.asarray(rows, dtype=float).reshape(-1).tolist()


class Loader:
    """Creates GPU resources from in-memory data and files."""

    def __init__(
        self,
        audio_system: Optional[AudioSystem] = None,
        importer: Optional[ModelImporter] = None,
        sound_factory: Optional[SoundFactory] = None,
    ) -> None:
        self.audio_system = audio_system
        self.importer = importer or ModelImporter()
        self._sound_factory = sound_factory or _pyglet_sound

    def load_audio(self, filepath: PathLike, stream: bool) -> AudioClip:
        """Load a sound, streamed or fully decoded, and register it."""
        if self.audio_system is None:
            raise RuntimeError("no audio system to register the sound with")
        path = str(filepath)
        sound = self._sound_factory(path, bool(stream))
        sound_id = self.audio_system.register_audio(sound)
        return AudioClip(sound_id, path)

    def _gen_vao(self) -> int:
        gl = get_backend()
        vao = gl.gen_vertex_array()
        gl.bind_vertex_array(vao)
        return vao

    def _load_data(self, index: int, size: int, values: Sequence[float]) -> None:
        gl = get_backend()
        vbo = gl.gen_buffer()
        gl.bind_array_buffer(vbo)
        gl.array_buffer_data(list(values))
        gl.vertex_attrib_pointer(index, size)

    def _load_indices(self, indices: Sequence[int]) -> int:
        gl = get_backend()
        ebo = gl.gen_buffer()
        gl.bind_element_buffer(ebo)
        gl.element_buffer_data([int(i) for i in indices])
        return ebo

    def load_positions(
        self, index: int, dimensions: int, positions: Sequence[float]
    ) -> RawModel:
        """Load a flat list of position components, ``dimensions`` per vertex."""
        vao = self._gen_vao()
        self._load_data(index, dimensions, _flatten(positions))
        return RawModel(vao, 0, len(positions) // dimensions)

    def load_vec3(self, index: int, positions: Sequence[Sequence[float]]) -> RawModel:
        """Load 3-component positions; the draw count is a third of their number."""
        vao = self._gen_vao()
        self._load_data(index, 3, _flatten(positions))
        return RawModel(vao, 0, len(positions) // 3)

    def load_indexed(
        self,
        index: int,
        dimensions: int,
        positions: Sequence[float],
        indices: Sequence[int],
    ) -> RawModel:
        """Load flat positions and triangle indices."""
        vao = self._gen_vao()
        self._load_data(index, dimensions, _flatten(positions))
        ebo = self._load_indices(indices)
        return RawModel(vao, ebo, len(indices))

    def load_with_uvs(
        self, positions: Sequence[Sequence[float]], uvs: Sequence[Sequence[float]]
    ) -> RawModel:
        """Load positions at location 0 and texture coordinates at location 1."""
        vao = self._gen_vao()
        self._load_data(0, 3, _flatten(positions))
        self._load_data(1, 2, _flatten(uvs))
        return RawModel(vao, 0, len(positions))

    def load_with_uvs_indexed(
        self,
        positions: Sequence[Sequence[float]],
        uvs: Sequence[Sequence[float]],
        indices: Sequence[int],
    ) -> RawModel:
        """Load indices, positions and texture coordinates."""
        vao = self._gen_vao()
        ebo = self._load_indices(indices)
        self._load_data(0, 3, _flatten(positions))
        self._load_data(1, 2, _flatten(uvs))
        return RawModel(vao, ebo, len(indices))

    def _load_model(self, positions, indices, uvs, normals, tangents, bitangents) -> RawModel:
        vao = self._gen_vao()
        ebo = self._load_indices(indices)
        self._load_data(0, 3, _flatten(positions))
        self._load_data(1, 2, _flatten(uvs))
        self._load_data(2, 3, _flatten(normals))
        self._load_data(3, 3, _flatten(tangents))
        self._load_data(4, 3, _flatten(bitangents))
        return RawModel(vao, ebo, len(indices))

    def import_simple_model(self, filepath: PathLike) -> RawModel:
        """Import a single-mesh model.

        Attribute locations: positions 0, uvs 1, normals 2, tangents 3,
        bitangents 4.
        """
        mesh = self.importer.import_mesh(filepath)
        return self._load_model(
            mesh.positions, mesh.indices, mesh.uvs, mesh.normals, mesh.tangents, mesh.bitangents
        )

    def load_texture(self, filepath: PathLike, flip_vertically: bool) -> GLTexture:
        """Upload an RGB or RGBA image as a mipmapped, repeating 2D texture."""
        image = _open_image(filepath, flip_vertically)
        fmt = _FORMATS.get(image.mode)
        if fmt is None:
            raise ValueError(
                f"unsupported image format: {len(image.getbands())} channels found in {filepath}"
            )
        gl = get_backend()
        texture_id = gl.gen_texture()
        gl.bind_texture(GL_TEXTURE_2D, texture_id)
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_REPEAT)
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_REPEAT)
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR_MIPMAP_LINEAR)
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        gl.tex_parameter(GL_TEXTURE_2D, GL_TEXTURE_LOD_BIAS, -0.4)
        gl.tex_image_2d(
            GL_TEXTURE_2D,
            fmt,
            image.width,
            image.height,
            fmt,
            GL_UNSIGNED_BYTE,
            image.tobytes(),
        )
        gl.generate_mipmap(GL_TEXTURE_2D)
        return GLTexture(texture_id)

    def load_cubemap(self, directory: PathLike) -> GLCubeMap:
        """Build a cube map from the six face images named in CUBEMAP_FACES."""
        gl = get_backend()
        texture_id = gl.gen_texture()
        gl.bind_texture(GL_TEXTURE_CUBE_MAP, texture_id)
        for offset, face in enumerate(CUBEMAP_FACES):
            image = _open_image(Path(directory) / face, True).convert("RGBA")
            gl.tex_image_2d(
                GL_TEXTURE_CUBE_MAP_POSITIVE_X + offset,
                GL_RGBA,
                image.width,
                image.height,
                GL_RGBA,
                GL_UNSIGNED_BYTE,
                image.tobytes(),
            )
        gl.tex_parameter(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        gl.tex_parameter(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        gl.tex_parameter(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        gl.tex_parameter(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        gl.tex_parameter(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_R, GL_CLAMP_TO_EDGE)
        gl.generate_mipmap(GL_TEXTURE_CUBE_MAP)
        return GLCubeMap(texture_id)