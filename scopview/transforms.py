"""4x4 matrix helpers for a right-handed, column-vector convention.

Matrices are row-major numpy arrays: a point ``p`` is transformed as
``matrix @ p`` and translations live in the last column.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

ArrayLike = Sequence[float] | np.ndarray


def radians(degrees: float) -> float:
    """Convert an angle from degrees to radians."""
    return degrees * math.pi / 180.0


def normalize(vector: ArrayLike) -> np.ndarray:
    """Return ``vector`` scaled to unit length."""
    values = np.asarray(vector, dtype=float)
    with np.errstate(invalid="ignore", divide="ignore"):
        return values / np.linalg.norm(values)


def cross(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    """Cross product of two 3-vectors."""
    return np.cross(np.asarray(a, dtype=float), np.asarray(b, dtype=float))


def perspective(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Projection mapping the view frustum to clip space (depth -1 at near, 1 at far)."""
    if aspect == 0 or near == far:
        raise ValueError("degenerate projection parameters")
    focal = 1.0 / math.tan(fov / 2.0)
    result = np.zeros((4, 4))
    result[0, 0] = focal / aspect
    result[1, 1] = focal
    result[2, 2] = (far + near) / (near - far)
    result[2, 3] = 2.0 * far * near / (near - far)
    result[3, 2] = -1.0
    return result


def look_at(eye: ArrayLike, center: ArrayLike, up: ArrayLike) -> np.ndarray:
    """View matrix placing ``eye`` at the origin and looking down -Z towards ``center``."""
    eye = np.asarray(eye, dtype=float)
    forward = normalize(np.asarray(center, dtype=float) - eye)
    side = normalize(cross(forward, up))
    upward = cross(side, forward)
    result = np.identity(4)
    result[0, :3] = side
    result[1, :3] = upward
    result[2, :3] = -forward
    result[0, 3] = -np.dot(side, eye)
    result[1, 3] = -np.dot(upward, eye)
    result[2, 3] = np.dot(forward, eye)
    return result


def _rotation(angle: float, axis: ArrayLike) -> np.ndarray:
    a = normalize(axis)
    c, s = math.cos(angle), math.sin(angle)
    skew = np.array([[0.0, -a[2], a[1]], [a[2], 0.0, -a[0]], [-a[1], a[0], 0.0]])
    result = np.identity(4)
    result[:3, :3] = c * np.identity(3) + (1.0 - c) * np.outer(a, a) + s * skew
    return result


def rotate(matrix: np.ndarray, angle: float, axis: ArrayLike) -> np.ndarray:
    """Return ``matrix`` followed (on the right) by a rotation of ``angle`` about ``axis``."""
    return np.asarray(matrix, dtype=float) @ _rotation(angle, axis)


def translate(matrix: np.ndarray, offset: ArrayLike) -> np.ndarray:
    """Return ``matrix`` followed (on the right) by a translation of ``offset``."""
    step = np.identity(4)
    step[:3, 3] = np.asarray(offset, dtype=float)[:3]
    return np.asarray(matrix, dtype=float) @ step


def rotate_vector(vector: ArrayLike, angle: float, axis: ArrayLike) -> np.ndarray:
    """Rotate a 3-vector by ``angle`` radians about ``axis``."""
    return _rotation(angle, axis)[:3, :3] @ np.asarray(vector, dtype=float)