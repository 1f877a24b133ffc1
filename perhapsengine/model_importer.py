"""Importing single meshes from binary glTF files, with a binary cache."""

from __future__ import annotations

import json
import logging
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import numpy as np

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

CACHE_SUFFIX = ".perhaps"

_GLB_MAGIC = b"glTF"
_CHUNK_JSON = 0x4E4F534A
_CHUNK_BIN = 0x004E4942
_COMPONENT_DTYPES = {
    5120: np.int8,
    5121: np.uint8,
    5122: np.int16,
    5123: np.uint16,
    5125: np.uint32,
    5126: np.float32,
}
_TYPE_SIZES = {"SCALAR": 1, "VEC2": 2, "VEC3": 3, "VEC4": 4}

Vec = tuple[float, ...]


@dataclass
class GLMesh:
    """Vertex attributes and triangle indices of one mesh."""

    indices: list[int] = field(default_factory=list)
    positions: list[Vec] = field(default_factory=list)
    uvs: list[Vec] = field(default_factory=list)
    normals: list[Vec] = field(default_factory=list)
    tangents: list[Vec] = field(default_factory=list)
    bitangents: list[Vec] = field(default_factory=list)


def _rows(array: np.ndarray) -> list[Vec]:
    return [tuple(float(v) for v in row) for row in array]


class _Glb:
    def __init__(self, path: Path) -> None:
        data = path.read_bytes()
        if len(data) < 12 or data[:4] != _GLB_MAGIC:
            raise ValueError(f"{path} is not a binary glTF file")
        offset = 12
        self.doc: dict[str, Any] = {}
        self.bin = b""
        while offset + 8 <= len(data):
            length, kind = struct.unpack_from("<II", data, offset)
            chunk = data[offset + 8:offset + 8 + length]
            if kind == _CHUNK_JSON:
                self.doc = json.loads(chunk.decode("utf-8"))
            elif kind == _CHUNK_BIN:
                self.bin = chunk
            offset += 8 + length

    def accessor(self, index: int) -> np.ndarray:
        acc = self.doc["accessors"][index]
        view = self.doc["bufferViews"][acc["bufferView"]]
        dtype = np.dtype(_COMPONENT_DTYPES[acc["componentType"]])
        width = _TYPE_SIZES[acc["type"]]
        stride = view.get("byteStride", dtype.itemsize * width)
        start = view.get("byteOffset", 0) + acc.get("byteOffset", 0)
        array = np.ndarray(
            shape=(acc["count"], width),
            dtype=dtype,
            buffer=self.bin,
            offset=start,
            strides=(stride, dtype.itemsize),
        )
        return np.array(array)

    def mesh_order(self) -> list[int]:
        """Mesh indices in node order: children before their parent."""
        nodes = self.doc.get("nodes", [])
        scenes = self.doc.get("scenes")
        if not nodes or not scenes:
            return list(range(len(self.doc.get("meshes", []))))
        order: list[int] = []

        def visit(node_index: int) -> None:
            node = nodes[node_index]
            for child in node.get("children", []):
                visit(child)
            if "mesh" in node:
                order.append(node["mesh"])

        for root in scenes[self.doc.get("scene", 0)].get("nodes", []):
            visit(root)
        return order


def _tangent_space(positions, uvs, indices) -> tuple[np.ndarray, np.ndarray]:
    tangents = np.zeros_like(positions)
    bitangents = np.zeros_like(positions)
    for a, b, c in indices.reshape(-1, 3):
        e1 = positions[b] - positions[a]
        e2 = positions[c] - positions[a]
        du1, dv1 = uvs[b] - uvs[a]
        du2, dv2 = uvs[c] - uvs[a]
        det = du1 * dv2 - du2 * dv1
        if det == 0:
            continue
        r = 1.0 / det
        tangent = (e1 * dv2 - e2 * dv1) * r
        bitangent = (e2 * du1 - e1 * du2) * r
        for vertex in (a, b, c):
            tangents[vertex] += tangent
            bitangents[vertex] += bitangent

    def unit(vectors: np.ndarray) -> np.ndarray:
        lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
        return np.divide(vectors, lengths, out=np.zeros_like(vectors), where=lengths > 0)

    return unit(tangents), unit(bitangents)


class ModelImporter:
    """Imports meshes, writing a cache file next to the model on first import."""

    def __init__(self) -> None:
        self.total_vertex_count = 0

    @staticmethod
    def cache_path(filepath: PathLike) -> Path:
        """The cache file used for ``filepath``: same directory and stem, ``.perhaps`` suffix."""
        return Path(filepath).with_suffix(CACHE_SUFFIX)

    def import_mesh(self, filepath: PathLike) -> GLMesh:
        """Load the cached mesh if present, otherwise import the model and cache it."""
        cache = self.cache_path(filepath)
        if cache.is_file():
            logger.info("%s was found. using that instead.", cache)
            return self.deserialize(cache)
        path = Path(filepath)
        if not path.is_file():
            raise FileNotFoundError(f"model not found: {path}")
        glb = _Glb(path)
        mesh = GLMesh()
        self.total_vertex_count = 0
        meshes = glb.doc.get("meshes", [])
        for mesh_index in glb.mesh_order():
            for primitive in meshes[mesh_index].get("primitives", []):
                self._process_primitive(glb, primitive, mesh)
        self.serialize(mesh, cache)
        return mesh

    def _process_primitive(self, glb: _Glb, primitive: dict, mesh: GLMesh) -> None:
        attributes = primitive.get("attributes", {})
        if "POSITION" not in attributes:
            raise ValueError("primitive has no positions")
        positions = glb.accessor(attributes["POSITION"]).astype(float)
        count = len(positions)
        self.total_vertex_count += count
        normals = (
            glb.accessor(attributes["NORMAL"]).astype(float)
            if "NORMAL" in attributes
            else np.zeros((count, 3))
        )
        uvs = (
            glb.accessor(attributes["TEXCOORD_0"]).astype(float)
            if "TEXCOORD_0" in attributes
            else np.zeros((count, 2))
        )
        if "indices" in primitive:
            indices = glb.accessor(primitive["indices"]).reshape(-1).astype(np.int64)
        else:
            indices = np.arange(count, dtype=np.int64)
        indices = indices[: len(indices) - len(indices) % 3]
        tangents, bitangents = _tangent_space(positions, uvs, indices)

        mesh.positions.extend(_rows(positions))
        mesh.normals.extend(_rows(normals))
        mesh.uvs.extend(_rows(uvs))
        mesh.tangents.extend(_rows(tangents))
        mesh.bitangents.extend(_rows(bitangents))
        mesh.indices.extend(int(i) for i in indices)

    def serialize(self, mesh: GLMesh, filepath: PathLike) -> None:
        """Write six 64-bit counts, then float32 attributes and uint32 indices."""
        header = struct.pack(
            "<6Q",
            len(mesh.positions),
            len(mesh.uvs),
            len(mesh.normals),
            len(mesh.indices),
            len(mesh.tangents),
            len(mesh.bitangents),
        )
        parts = [
            header,
            np.asarray(mesh.positions, dtype="<f4").reshape(-1, 3).tobytes(),
            np.asarray(mesh.uvs, dtype="<f4").reshape(-1, 2).tobytes(),
            np.asarray(mesh.normals, dtype="<f4").reshape(-1, 3).tobytes(),
            np.asarray(mesh.indices, dtype="<u4").tobytes(),
            np.asarray(mesh.tangents, dtype="<f4").reshape(-1, 3).tobytes(),
            np.asarray(mesh.bitangents, dtype="<f4").reshape(-1, 3).tobytes(),
        ]
        Path(filepath).write_bytes(b"".join(parts))

    def deserialize(self, filepath: PathLike) -> GLMesh:
        """Read a mesh written by ``serialize``."""
        data = Path(filepath).read_bytes()
        if len(data) < 48:
            raise ValueError(f"{filepath} is truncated")
        n_pos, n_uv, n_norm, n_idx, n_tan, n_bitan = struct.unpack_from("<6Q", data, 0)
        offset = 48

        def take(count: int, dtype: str, width: int) -> np.ndarray:
            nonlocal offset
            size = count * width * 4
            if offset + size > len(data):
                raise ValueError(f"{filepath} is truncated")
            array = np.frombuffer(data, dtype=dtype, count=count * width, offset=offset)
            offset += size
            return array.reshape(count, width) if width > 1 else array

        positions = take(n_pos, "<f4", 3)
        uvs = take(n_uv, "<f4", 2)
        normals = take(n_norm, "<f4", 3)
        indices = take(n_idx, "<u4", 1)
        tangents = take(n_tan, "<f4", 3)
        bitangents = take(n_bitan, "<f4", 3)
        return GLMesh(
            indices=[int(i) for i in indices],
            positions=_rows(positions),
            uvs=_rows(uvs),
            normals=_rows(normals),
            tangents=_rows(tangents),
            bitangents=_rows(bitangents),
        )