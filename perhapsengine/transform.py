"""Position, rotation and scale of an object in 3D space."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .mathutils import normalize, rotate, scale, translate

_X_AXIS = (1.0, 0.0, 0.0)
_Y_AXIS = (0.0, 1.0, 0.0)
_Z_AXIS = (0.0, 0.0, 1.0)


def _vec3(value=0.0) -> np.ndarray:
    return np.full(3, value, dtype=float)


@dataclass
class Transform:
    """Position, Euler rotation in degrees and scale, plus the derived model matrix."""

    position: np.ndarray = field(default_factory=_vec3)
    rotation: np.ndarray = field(default_factory=_vec3)
    scale: np.ndarray = field(default_factory=lambda: _vec3(1.0))
    _model: np.ndarray = field(default_factory=lambda: np.identity(4), init=False, repr=False)
    _forward: np.ndarray = field(default_factory=_vec3, init=False, repr=False)
    _right: np.ndarray = field(default_factory=_vec3, init=False, repr=False)
    _up: np.ndarray = field(default_factory=_vec3, init=False, repr=False)

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=float)
        self.rotation = np.asarray(self.rotation, dtype=float)
        self.scale = np.asarray(self.scale, dtype=float)

    @property
    def model(self) -> np.ndarray:
        """The model matrix from the last update_trs/update_srt call."""
        return self._model.copy()

    @property
    def forward(self) -> np.ndarray:
        return self._forward.copy()

    @property
    def up(self) -> np.ndarray:
        return self._up.copy()

    @property
    def right(self) -> np.ndarray:
        return self._right.copy()

    def _rotated(self, matrix: np.ndarray) -> np.ndarray:
        rx, ry, rz = (math.radians(angle) for angle in self.rotation)
        matrix = rotate(matrix, rx, _X_AXIS)
        matrix = rotate(matrix, ry, _Y_AXIS)
        return rotate(matrix, rz, _Z_AXIS)

    def update_trs(self) -> None:
        """Build the model matrix in translate, rotate, scale order."""
        matrix = translate(np.identity(4), self.position)
        matrix = self._rotated(matrix)
        self._model = scale(matrix, self.scale)
        self._calc_directions()

    def update_srt(self) -> None:
        """Build the model matrix in scale, rotate, translate order."""
        matrix = scale(np.identity(4), self.scale)
        matrix = self._rotated(matrix)
        self._model = translate(matrix, self.position)
        self._calc_directions()

    def _calc_directions(self) -> None:
        inverse = np.linalg.inv(self._model)
        self._forward = normalize(inverse[:3, 2])
        self._right = normalize(np.cross(self._forward, _Y_AXIS))
        self._up = normalize(np.cross(self._forward, self._right))