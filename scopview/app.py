"""Viewer settings and the per-frame logic driven by user input and time."""

from __future__ import annotations

import enum
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

GL_POINTS = 0x0000
GL_TRIANGLES = 0x0004
USAGE = "Usage: scopview [path/to/your/file.obj]"
FULL_ROTATION_MS = 10000.0
FADE_MS = 2000.0


class ShaderType(enum.IntEnum):
    """Shader presets the viewer can switch between."""

    MATERIAL = 0
    REFLECTION = 1
    REFRACTION = 2


@dataclass
class Settings:
    """User-adjustable state; timestamps are in seconds."""

    current: ShaderType = ShaderType.MATERIAL
    background: tuple[float, float, float] = (0.1, 0.1, 0.1)
    primitive: int = GL_TRIANGLES
    dot_size: int = 1
    free_orbit: bool = False
    last_rotation: float = field(default_factory=time.monotonic)
    textured: bool = False
    opacity: float = 0.0
    last_transition: float = field(default_factory=time.monotonic)


def check_arguments(argv: Sequence[str]) -> str:
    """Return the single model path, raising ``ValueError`` otherwise."""
    if len(argv) != 1:
        problem = "No argument" if len(argv) < 1 else "Too much arguments"
        raise ValueError(f"{problem} provided\n{USAGE}")
    return argv[0]


def drag_to_rotation(dx: float, dy: float, width: float, height: float) -> tuple[float, float]:
    """Orbit angles for a mouse drag: a window width is a full turn, a height half a turn."""
    return dx * (2 * math.pi / width), dy * (math.pi / height)


def skybox_view(view: Any) -> np.ndarray:
    """Copy of a view matrix with its translation removed."""
    result = np.array(view, dtype=float)
    result[0, 3] = 0.0
    result[1, 3] = 0.0
    result[2, 3] = 0.0
    result[3, 3] = 1.0
    return result


def _elapsed_ms(previous: float, now: float) -> int:
    return int((now - previous) * 1000)


def handle_time(settings: Settings, model: Any, now: float | None = None) -> None:
    """Advance the automatic rotation and the texture fade to ``now``."""
    if now is None:
        now = time.monotonic()
    if not settings.free_orbit:
        elapsed = _elapsed_ms(settings.last_rotation, now)
        settings.last_rotation = now
        model.rotate(elapsed * 360.0 / FULL_ROTATION_MS)
    elapsed = _elapsed_ms(settings.last_transition, now)
    settings.last_transition = now
    if settings.textured:
        settings.opacity = min(1.0, settings.opacity + elapsed / FADE_MS)
    else:
        settings.opacity = max(0.0, settings.opacity - elapsed / FADE_MS)