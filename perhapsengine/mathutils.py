"""Vector and matrix helpers used throughout the engine.

Matrices are 4x4 numpy arrays in the usual mathematical layout, so a
point ``p`` is transformed as ``matrix @ p``.  Angles are in radians.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

_AXIS_LABELS = "XYZW"


def _fmt(value: float) -> str:
    return f"{float(value):g}"


def format_vec(vector: Sequence[float]) -> str:
    """Render a 2, 3 or 4 component vector as `` X: .. Y: ..``."""
    values = list(vector)
    if not 2 <= len(values) <= 4:
        raise ValueError(f"expected a vector of 2 to 4 components, got {len(values)}")
    return "".join(
        f" {label}: {_fmt(value)}" for label, value in zip(_AXIS_LABELS, values)
    )


def format_mat4(matrix: np.ndarray) -> str:
    """Render a 4x4 matrix column by column, one column per line."""
    m = np.asarray(matrix, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
    lines = []
    for column in range(4):
        cells = (f"[{column}{row}]:{_fmt(m[row, column])}" for row in range(4))
        lines.append("|".join(cells) + "\n")
    return "".join(lines)


def translate(matrix: np.ndarray, offset: Sequence[float]) -> np.ndarray:
    """Return ``matrix`` followed by a translation by ``offset``."""
    t = np.identity(4)
    t[:3, 3] = np.asarray(offset, dtype=float)[:3]
    return np.asarray(matrix, dtype=float) @ t


def rotate(matrix: np.ndarray, angle: float, axis: Sequence[float]) -> np.ndarray:
    """Return ``matrix`` followed by a rotation of ``angle`` radians about ``axis``."""
    x, y, z = normalize(np.asarray(axis, dtype=float)[:3])
    c = np.cos(angle)
    s = np.sin(angle)
    t = 1.0 - c
    r = np.identity(4)
    r[:3, :3] = [
        [t * x * x + c, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, t * y * y + c, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
    ]
    return np.asarray(matrix, dtype=float) @ r


def scale(matrix: np.ndarray, factors: Sequence[float]) -> np.ndarray:
    """Return ``matrix`` followed by a per-axis scale."""
    s = np.identity(4)
    sx, sy, sz = np.asarray(factors, dtype=float)[:3]
    s[0, 0], s[1, 1], s[2, 2] = sx, sy, sz
    return np.asarray(matrix, dtype=float) @ s


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    tan_half = np.tan(fovy / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


def normalize(vector: Sequence[float]) -> np.ndarray:
    """Return ``vector`` scaled to unit length; a zero vector gives NaNs."""
    v = np.asarray(vector, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return v / np.linalg.norm(v)