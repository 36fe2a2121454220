"""Orbiting camera and the rotating scene light."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from scopview.transforms import (
    cross,
    look_at,
    normalize,
    perspective,
    radians,
    rotate,
    rotate_vector,
    translate,
)

INIT_POSITION = (0.0, 0.0, 3.0)
ZOOM_MIN = 0.3
ZOOM_MAX = 1.5
ZOOM_SPEED = 0.03
POLE_LIMIT = -0.99
FIELD_OF_VIEW = 45.0
NEAR_PLANE = 0.1
FAR_PLANE = 100.0

LIGHT_POSITION = (0.0, 3.0, -3.0)
_Y_AXIS = np.array([0.0, 1.0, 0.0])


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


class ArcballCamera:
    """A camera circling the origin, with panning and a clamped zoom factor."""

    def __init__(
        self,
        width: float,
        height: float,
        initial_position: Sequence[float] = INIT_POSITION,
    ) -> None:
        if height == 0:
            raise ValueError("viewport height must not be zero")
        self.projection = perspective(radians(FIELD_OF_VIEW), width / height, NEAR_PLANE, FAR_PLANE)
        self._initial = np.array(initial_position, dtype=float)
        self.eye = self._initial.copy()
        self.target = np.zeros(3)
        self.up = _Y_AXIS.copy()
        self.zoom_factor = 1.0
        self.translation = np.zeros(3)
        self.view = np.identity(4)
        self._update_view()

    def _orientation(self) -> np.ndarray:
        return normalize(self.eye - self.target)

    def _right(self) -> np.ndarray:
        return normalize(cross(self.up, self._orientation()))

    def _update_view(self) -> None:
        self.view = translate(look_at(self.eye / self.zoom_factor, self.target, self.up), self.translation)

    def rotate(self, angle_x: float, angle_y: float) -> None:
        """Orbit horizontally by ``angle_x`` and vertically by ``angle_y`` radians.

        Vertical motion stops near the poles so the camera never flips over.
        """
        if float(np.dot(self._orientation(), self.up)) * _sign(angle_y) < POLE_LIMIT:
            angle_y = 0.0
        right = self._right()
        position = np.array([*self.eye, 1.0])
        position = rotate(np.identity(4), angle_x, self.up) @ position
        position = rotate(np.identity(4), angle_y, right) @ position
        self.eye = position[:3]
        self._update_view()

    def translate(self, x: float, y: float) -> None:
        """Pan the view; a move that would push the origin off screen is undone per axis."""
        saved = self.translation.copy()
        self.translation[0] -= x / self.zoom_factor
        self.translation[1] += y / self.zoom_factor
        self._update_view()

        projected = self.matrix() @ np.array([0.0, 0.0, 0.0, 1.0])
        w = projected[3]
        for axis in (0, 1):
            if projected[axis] < -w or projected[axis] > w:
                self.translation[axis] = saved[axis]
        self._update_view()

    def zoom(self, value: float) -> None:
        """Change the zoom factor by a mouse wheel amount, keeping it in range."""
        self.zoom_factor = max(ZOOM_MIN, min(ZOOM_MAX, self.zoom_factor + value * ZOOM_SPEED))
        self._update_view()

    def reset(self) -> None:
        """Return to the initial position with no panning."""
        self.eye = self._initial.copy()
        self.translation = np.zeros(3)
        self._update_view()

    def matrix(self) -> np.ndarray:
        """Combined projection and view matrix."""
        return self.projection @ self.view

    def position(self) -> np.ndarray:
        """Effective camera position, taking the zoom into account."""
        return self.eye / self.zoom_factor


class LightSource:
    """A point light turning around the vertical axis; ``angle`` is in degrees."""

    def __init__(self, initial_position: Sequence[float] = LIGHT_POSITION, angle: float = 0.0) -> None:
        self.initial_position = np.array(initial_position, dtype=float)
        self.angle = angle

    def position(self) -> np.ndarray:
        """Current position of the light."""
        return rotate_vector(self.initial_position, radians(self.angle), _Y_AXIS)