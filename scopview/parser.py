"""Line tokenising, numeric field parsing and the material library reader."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]

TEXTURE_DIRECTORY = "resources/textures/"
DEFAULT_TEXTURE = TEXTURE_DIRECTORY + "default.bmp"

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _stoi(text: str) -> int:
    """Parse the leading integer of ``text``, ignoring whatever follows."""
    match = _INT_RE.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _stof(text: str) -> float:
    """Parse the leading floating point number of ``text``."""
    match = _FLOAT_RE.match(text)
    if match is None:
        raise ValueError(f"invalid number: {text!r}")
    return float(match.group(1))


@dataclass(frozen=True)
class MaterialUniform:
    """Material values laid out the way the shaders consume them."""

    ambient: tuple[float, float, float, float]
    diffuse: tuple[float, float, float, float]
    specular: tuple[float, float, float, float]
    shininess: float
    refraction: float
    opacity: float
    illum: int


@dataclass
class Material:
    """A named surface description read from a .mtl library."""

    id: int = 0
    ambient_color: Color = (1.0, 1.0, 1.0)
    diffuse_color: Color = (1.0, 1.0, 1.0)
    specular_color: Color = (1.0, 1.0, 1.0)
    specular_exponent: float = 500.0
    refraction: float = 1.0
    opacity: float = 1.0
    illumination_model: int = 1
    texture: str = DEFAULT_TEXTURE

    def uniform_data(self) -> MaterialUniform:
        """Return the material as homogeneous colours plus scalar parameters."""
        return MaterialUniform(
            ambient=(*self.ambient_color, 1.0),
            diffuse=(*self.diffuse_color, 1.0),
            specular=(*self.specular_color, 1.0),
            shininess=self.specular_exponent,
            refraction=self.refraction,
            opacity=self.opacity,
            illum=self.illumination_model,
        )


def check_file_extension(filename: str, extension: str) -> None:
    """Raise ``ValueError`` unless ``filename`` ends with ``extension``."""
    if not os.fspath(filename).endswith(extension):
        raise ValueError(f"Bad file extension, must be {extension}")


def split(line: str, delimiter: str = " ", allow_empty: bool = False) -> list[str]:
    """Split ``line`` on ``delimiter``; empty fields are kept only if allowed.

    A trailing delimiter never produces a final empty field.
    """
    if not line:
        return []
    parts = line.split(delimiter)
    if line.endswith(delimiter):
        parts.pop()
    if allow_empty:
        return parts
    return [part for part in parts if part]


def _require_count(elements: Sequence[str], count: int) -> None:
    if len(elements) != count:
        raise ValueError(f"incorrect number of components for {elements[0]} statement")


def parse_string1(elements: Sequence[str]) -> str:
    """Return the single argument of a statement."""
    _require_count(elements, 2)
    return elements[1]


def parse_uint1(elements: Sequence[str]) -> int:
    """Return the single argument of a statement as an unsigned 32-bit value."""
    _require_count(elements, 2)
    return _stoi(elements[1]) % 2**32


def parse_float1(elements: Sequence[str]) -> float:
    """Return the single argument of a statement as a float."""
    _require_count(elements, 2)
    return _stof(elements[1])


def parse_float3(elements: Sequence[str]) -> Color:
    """Return the three arguments of a statement as a float triple."""
    _require_count(elements, 4)
    return (_stof(elements[1]), _stof(elements[2]), _stof(elements[3]))


def _apply_statement(material: Material, statement: str, elements: list[str]) -> None:
    head, sub = statement[0], statement[1:2]
    if head == "K":
        if sub == "a":
            material.ambient_color = parse_float3(elements)
        elif sub == "d":
            material.diffuse_color = parse_float3(elements)
        elif sub == "s":
            material.specular_color = parse_float3(elements)
    elif head == "N":
        if sub == "i":
            material.refraction = parse_float1(elements)
        elif sub == "s":
            material.specular_exponent = parse_float1(elements)
    elif head == "d":
        material.opacity = parse_float1(elements)
    elif head == "i":
        if statement == "illum":
            material.illumination_model = parse_uint1(elements)
            if material.illumination_model > 2:
                raise ValueError("incorrect illumination model")
    elif head == "m":
        if statement == "map_Kd":
            material.texture = TEXTURE_DIRECTORY + parse_string1(elements)


def _read_library(filename: str, first_id: int) -> dict[str, Material]:
    check_file_extension(filename, ".mtl")
    try:
        handle = open(filename, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise OSError(exc.strerror or str(exc)) from exc

    materials: dict[str, Material] = {}
    current: Material | None = None
    with handle:
        for line in handle:
            elements = split(line.rstrip("\n"))
            if not elements:
                continue
            statement = elements[0]
            if statement == "newmtl":
                if len(elements) != 2:
                    raise ValueError('"newmtl" can define only one material at a time')
                name = elements[1]
                if name in materials:
                    raise ValueError(f"material {name} is defined twice")
                current = Material(first_id + len(materials))
                materials[name] = current
            elif not statement.startswith("#"):
                if current is None:
                    raise ValueError('"newmtl" statement must precede any other statements')
                _apply_statement(current, statement, elements)
    return materials


def load_material_library(filename: str, library: dict[str, Material]) -> None:
    """Read a .mtl file into ``library``.

    New materials are numbered after those already present; names already in
    ``library`` are kept. Any problem is logged and leaves ``library`` untouched.
    """
    filename = os.fspath(filename)
    try:
        materials = _read_library(filename, len(library))
    except (OSError, ValueError) as exc:
        logger.error("%s: %s", filename, exc)
        return
    for name, material in materials.items():
        library.setdefault(name, material)