"""Reader for Wavefront .obj geometry files."""

from __future__ import annotations

import logging
import math
import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from scopview.parser import Material, _stof, _stoi, check_file_extension, load_material_library, split

logger = logging.getLogger(__name__)

Vec3 = tuple[float, float, float]

_ATOI_RE = re.compile(r"\s*([+-]?\d+)")


@dataclass(slots=True)
class Vertex:
    """1-based indices into positions, texture coordinates and normals; 0 means absent."""

    position: int
    uv: int = 0
    normal: int = 0


@dataclass
class Polygon:
    """A face: its corners and the material active when it was declared."""

    material: Material | None = None
    vertices: list[Vertex] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices)

    def __getitem__(self, index: int) -> Vertex:
        return self.vertices[index]


@dataclass
class ShadingGroup:
    """Faces sharing one smoothing setting."""

    smooth: bool = False
    polygons: list[Polygon] = field(default_factory=list)


@dataclass
class ObjectFile:
    """Everything read from an .obj file.

    ``minimum`` and ``maximum`` start at the origin, so the bounds always include it.
    """

    vertices: list[Vec3] = field(default_factory=list)
    textures: list[Vec3] = field(default_factory=list)
    normals: list[Vec3] = field(default_factory=list)
    groups: list[ShadingGroup] = field(default_factory=lambda: [ShadingGroup(False)])
    materials: dict[str, Material] = field(default_factory=dict)
    vertex_count: int = 0
    minimum: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    maximum: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    return int(match.group(1)) if match else 0


def _divide(value: float, w: float) -> float:
    if w == 0.0:
        if value == 0.0 or math.isnan(value):
            return math.nan
        return math.copysign(math.inf, value) * math.copysign(1.0, w)
    return value / w


class _ObjectParser:
    def __init__(self, base_path: str) -> None:
        self.base_path = base_path
        self.result = ObjectFile()
        self.material: Material | None = None

    def feed(self, line: str) -> None:
        elements = split(line)
        if not elements:
            return
        statement = elements[0]
        head = statement[0]
        if head == "m":
            self._material_library(elements)
        elif head == "u":
            self._use_material(elements)
        elif head == "v":
            kind = statement[1:2]
            if kind == "":
                self._vertex(elements)
            elif kind == "t":
                self._uv(elements)
            elif kind == "n":
                self._normal(elements)
        elif head == "f":
            self._polygon(elements)
        elif head == "s":
            self.result.groups.append(ShadingGroup(_atoi(line[2:]) > 0))

    def _vertex(self, elements: list[str]) -> None:
        if len(elements) not in (4, 5):
            raise ValueError("invalid number of coordinates")
        w = _stof(elements[4]) if len(elements) == 5 else 1.0
        coordinates = tuple(_divide(_stof(text), w) for text in elements[1:4])
        self.result.vertices.append(coordinates)
        low, high = self.result.minimum, self.result.maximum
        for axis, value in enumerate(coordinates):
            high[axis] = high[axis] if value < high[axis] else value
            low[axis] = low[axis] if low[axis] < value else value

    def _uv(self, elements: list[str]) -> None:
        if not 2 <= len(elements) <= 4:
            raise ValueError("invalid number of coordinates")
        values = [_stof(text) for text in elements[1:]]
        values += [0.0] * (3 - len(values))
        self.result.textures.append(tuple(values))

    def _normal(self, elements: list[str]) -> None:
        if len(elements) != 4:
            raise ValueError("invalid number of coordinates")
        self.result.normals.append(tuple(_stof(text) for text in elements[1:]))

    def _polygon(self, elements: list[str]) -> None:
        if len(elements) < 4:
            raise ValueError("a polygon must have at least 3 vertices")
        polygon = Polygon(self.material)
        self.result.groups[-1].polygons.append(polygon)
        for block in elements[1:]:
            fields = split(block, "/", True)
            self.result.vertex_count += 1
            indices = [0, 0, 0]
            for slot, text in enumerate(fields[:3]):
                if text:
                    index = _stoi(text)
                    if index < 1:
                        raise ValueError("indices must be strictly greater than 0")
                    indices[slot] = index
                elif slot == 0:
                    raise ValueError("vertex index cannot be omitted")
            polygon.vertices.append(Vertex(*indices))

    def _material_library(self, elements: list[str]) -> None:
        if elements[0] != "mtllib":
            return
        if len(elements) < 2:
            raise ValueError("missing material library name")
        names = [self.base_path + elements[1], *elements[2:]]
        for name in names:
            load_material_library(name, self.result.materials)

    def _use_material(self, elements: list[str]) -> None:
        if elements[0] != "usemtl":
            return
        if len(elements) < 2:
            raise ValueError("missing material name")
        if len(elements) > 2:
            raise ValueError("only one material name must be specified")
        self.material = self.result.materials.get(elements[1])
        if self.material is None:
            logger.warning('unknown material name "%s"', elements[1])


def parse_object(lines: Iterable[str], base_path: str = "") -> ObjectFile:
    """Parse .obj statements; material libraries are looked up under ``base_path``."""
    parser = _ObjectParser(base_path)
    for number, line in enumerate(lines, start=1):
        try:
            parser.feed(line.rstrip("\n"))
        except ValueError as exc:
            raise ValueError(f"Bad syntax at line {number}: {exc}") from exc
    return parser.result


def load_object(filename: str | os.PathLike[str]) -> ObjectFile:
    """Read an .obj file; its material libraries are resolved relative to it."""
    name = os.fspath(filename)
    check_file_extension(name, ".obj")
    index = name.rfind("/")
    base_path = name[:index + 1] if index != -1 else ""
    try:
        handle = open(name, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise OSError(f"Failed to open {name}") from exc
    with handle:
        return parse_object(handle, base_path)