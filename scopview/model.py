"""Mesh preparation: turning parsed .obj data into flat GPU-ready buffers."""

from __future__ import annotations

import math
import random
from collections import defaultdict, deque
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from scopview.gl import _call
from scopview.objfile import Vertex, load_object
from scopview.parser import Material, MaterialUniform
from scopview.transforms import cross, normalize, radians, rotate

DEFAULT_GREY = 0.3
MAX_MATERIALS = 64
MAX_TEXTURES = 16
GL_ARRAY_BUFFER = 0x8892
_FLOAT_SIZE = 4
_FLOATS_PER_VERTEX = 13
_Y_AXIS = (0.0, 1.0, 0.0)
_DEFAULT_UVS = (
    (1.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0),
)
_EMPTY_UNIFORM = MaterialUniform(
    ambient=(0.0, 0.0, 0.0, 0.0),
    diffuse=(0.0, 0.0, 0.0, 0.0),
    specular=(0.0, 0.0, 0.0, 0.0),
    shininess=0.0,
    refraction=0.0,
    opacity=0.0,
    illum=0,
)
_BAD_INDEX = "Invalid face index found in .obj file"


class ColorPalette:
    """Per-vertex grey shades that can be swapped for a uniform medium grey.

    The colours occupy the fourth attribute block of the vertex buffer.
    """

    def __init__(self, vertex_count: int, backend: Any = None) -> None:
        self.vertex_count = vertex_count
        self.capacity = vertex_count * 3
        self.colors: list[float] = []
        self.enabled = False
        self.backend = backend
        self._last_state = True

    def push(self, grey: float) -> None:
        """Append one vertex colour (the same value for red, green and blue)."""
        self.colors.extend((grey, grey, grey))

    def update(self) -> np.ndarray | None:
        """Write the current colours if the setting changed; return what was written."""
        if self.enabled == self._last_state:
            return None
        if self.enabled:
            data = np.zeros(self.capacity, dtype=np.float32)
            shades = self.colors[: self.capacity]
            data[: len(shades)] = shades
        else:
            data = np.full(self.capacity, DEFAULT_GREY, dtype=np.float32)
        if self.backend is not None:
            _call(
                self.backend,
                self.backend.buffer_sub_data,
                GL_ARRAY_BUFFER,
                _FLOAT_SIZE * self.capacity * 3,
                data.tobytes(),
            )
        self._last_state = self.enabled
        return data


@dataclass
class Model:
    """A loaded mesh.

    ``vertex_data`` holds, one block after another, positions, texture
    coordinates, normals, colours (three floats per vertex each) and the
    material slot of every vertex (one float each).
    """

    vertex_count: int
    vertex_data: np.ndarray
    indices: np.ndarray
    palette: ColorPalette
    materials: dict[str, Material] = field(default_factory=dict)
    rotation_angle: float = 0.0

    def rotate(self, angle: float) -> None:
        """Spin around the vertical axis by ``angle`` degrees."""
        self.rotation_angle += radians(angle)
        if self.rotation_angle > 2 * math.pi:
            self.rotation_angle = 0.0

    def matrix(self) -> np.ndarray:
        """Model transform for the current rotation."""
        identity = np.identity(4)
        if self.rotation_angle != 0.0:
            return rotate(identity, self.rotation_angle, _Y_AXIS)
        return identity

    def _slots(self) -> Iterator[tuple[int, Material]]:
        ordered = sorted(self.materials.items())[: MAX_MATERIALS - 1]
        for _name, material in ordered:
            slot = material.id + 1
            if slot < MAX_MATERIALS:
                yield slot, material

    def material_uniforms(self) -> list[MaterialUniform]:
        """Material table for the shaders; slot 0 is the default material."""
        uniforms = [Material().uniform_data()] + [_EMPTY_UNIFORM] * len(self.materials)
        for slot, material in self._slots():
            uniforms[slot] = material.uniform_data()
        return uniforms

    @property
    def texture_paths(self) -> dict[int, str]:
        """Texture file to bind on each texture unit used by a material."""
        return {slot: material.texture for slot, material in self._slots() if slot < MAX_TEXTURES}


def triangulate(count: int) -> list[tuple[int, int, int]]:
    """Split a polygon of ``count`` corners into triangles of local corner indices."""
    if count < 3:
        raise ValueError("a polygon must have at least 3 vertices")
    if count == 3:
        return [(0, 1, 2)]
    window = deque([1, 0, 2])
    direction = -1
    triangles: list[tuple[int, int, int]] = []
    for _ in range(count - 2):
        triangles.append((window[0], window[1], window[2]))
        window.popleft()
        following = window[0] + direction
        if following < 0:
            following = count - 1
        window.append(following)
        direction = -direction
    return triangles


def _fetch(source: Sequence[Any], index: int) -> Any:
    if index < 1 or index > len(source):
        raise RuntimeError(_BAD_INDEX)
    return source[index - 1]


def _insert(buffer: np.ndarray, offset: int, source: Sequence[Any], index: int) -> None:
    if index > len(source):
        raise RuntimeError(_BAD_INDEX)
    if index != 0:
        buffer[offset:offset + 3] = source[index - 1]


def load_model(path: str, rng: random.Random | None = None) -> Model:
    """Read an .obj file and build centred, scaled, triangulated vertex buffers."""
    obj = load_object(path)
    rng = rng if rng is not None else random.Random()
    count = obj.vertex_count
    buffer = np.zeros(count * _FLOATS_PER_VERTEX, dtype=np.float32)
    indices: list[int] = []
    palette = ColorPalette(count)

    low = np.asarray(obj.minimum, dtype=float)
    high = np.asarray(obj.maximum, dtype=float)
    mean = -(high + low) / 2
    biggest = max(float(np.max(np.abs(high))), float(np.max(np.abs(low))), 0.0)
    with np.errstate(all="ignore"):
        scale = np.float64(1.0) / np.float64(biggest)
        positions = [(np.asarray(v, dtype=float) + mean) * scale for v in obj.vertices]

    textures = list(obj.textures) or list(_DEFAULT_UVS)
    normals = [np.asarray(n, dtype=float) for n in obj.normals]

    vertex_index = 0
    last_index = 0
    for group in obj.groups:
        shared: dict[int, list[Vertex]] = defaultdict(list)
        for polygon in group.polygons:
            if all(vertex.normal == 0 for vertex in polygon):
                a, b, c = (_fetch(positions, vertex.position) for vertex in polygon.vertices[:3])
                with np.errstate(all="ignore"):
                    normals.append(normalize(cross(a - b, a - c)))
                for vertex in polygon:
                    vertex.normal = len(normals)
                    if group.smooth:
                        shared[vertex.position].append(vertex)

        if group.smooth:
            for position in sorted(shared):
                corners = shared[position]
                total = np.zeros(3)
                for corner in corners:
                    total = total + normals[corner.normal - 1]
                normals.append(normalize(total))
                for corner in corners:
                    corner.normal = len(normals)

        for polygon in group.polygons:
            grey = rng.random() * 0.4 + 0.1
            slot = polygon.material.id + 1 if polygon.material is not None else 0
            for corner, vertex in enumerate(polygon):
                uv = vertex.uv or corner % 4 + 1
                _insert(buffer, vertex_index * 3, positions, vertex.position)
                _insert(buffer, (count + vertex_index) * 3, textures, uv)
                _insert(buffer, (2 * count + vertex_index) * 3, normals, vertex.normal)
                buffer[count * 12 + vertex_index] = slot
                palette.push(grey)
                vertex_index += 1
            indices.extend(last_index + i for triangle in triangulate(len(polygon)) for i in triangle)
            last_index += len(polygon)

    return Model(
        vertex_count=count,
        vertex_data=buffer,
        indices=np.asarray(indices, dtype=np.uint32),
        palette=palette,
        materials=obj.materials,
    )