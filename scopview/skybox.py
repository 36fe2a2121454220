"""A textured cube drawn behind the scene."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from scopview.bmp import BMPImage, read_bmp
from scopview.gl import (
    GL_BGRA,
    GL_CLAMP_TO_EDGE,
    GL_RGBA8,
    GL_TEXTURE_MAG_FILTER,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_WRAP_S,
    GL_TEXTURE_WRAP_T,
    GL_UNSIGNED_BYTE,
    _call,
)

GL_FALSE = 0
GL_TRUE = 1
GL_TRIANGLES = 0x0004
GL_UNSIGNED_INT = 0x1405
GL_FLOAT = 0x1406
GL_LINEAR = 0x2601
GL_TEXTURE_WRAP_R = 0x8072
GL_TEXTURE_CUBE_MAP = 0x8513
GL_TEXTURE_CUBE_MAP_POSITIVE_X = 0x8515
GL_ARRAY_BUFFER = 0x8892
GL_ELEMENT_ARRAY_BUFFER = 0x8893
GL_STATIC_DRAW = 0x88E4

VERTICES = np.array(
    [
        -0.5, 0.5, 0.5,
        0.5, 0.5, 0.5,
        0.5, -0.5, 0.5,
        -0.5, -0.5, 0.5,
        -0.5, 0.5, -0.5,
        0.5, 0.5, -0.5,
        0.5, -0.5, -0.5,
        -0.5, -0.5, -0.5,
    ],
    dtype=np.float32,
)

INDICES = np.array(
    [
        0, 1, 2, 0, 2, 3,
        4, 5, 6, 4, 6, 7,
        0, 4, 5, 0, 5, 1,
        1, 5, 6, 1, 6, 2,
        0, 4, 7, 0, 7, 3,
        3, 7, 6, 3, 6, 2,
    ],
    dtype=np.uint32,
)

FACE_FILES = (
    "resources/textures/right.bmp",
    "resources/textures/left.bmp",
    "resources/textures/top.bmp",
    "resources/textures/bottom.bmp",
    "resources/textures/front.bmp",
    "resources/textures/back.bmp",
)


@dataclass
class Skybox:
    """Six cube faces in the order +X, -X, +Y, -Y, +Z, -Z and their GPU handles."""

    faces: list[BMPImage]
    vertex_array: int | None = field(default=None, init=False)
    vertex_buffer: int | None = field(default=None, init=False)
    index_buffer: int | None = field(default=None, init=False)
    texture: int | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if len(self.faces) != len(FACE_FILES):
            raise ValueError(f"a skybox needs {len(FACE_FILES)} faces, got {len(self.faces)}")

    def upload(self, backend: Any) -> None:
        """Create the cube geometry and cube map texture on ``backend``."""
        self.vertex_array = _call(backend, backend.gen_vertex_array)
        _call(backend, backend.bind_vertex_array, self.vertex_array)

        self.vertex_buffer = _call(backend, backend.gen_buffer)
        _call(backend, backend.bind_buffer, GL_ARRAY_BUFFER, self.vertex_buffer)
        _call(backend, backend.buffer_data, GL_ARRAY_BUFFER, VERTICES.tobytes(), GL_STATIC_DRAW)

        self.index_buffer = _call(backend, backend.gen_buffer)
        _call(backend, backend.bind_buffer, GL_ELEMENT_ARRAY_BUFFER, self.index_buffer)
        _call(backend, backend.buffer_data, GL_ELEMENT_ARRAY_BUFFER, INDICES.tobytes(), GL_STATIC_DRAW)

        _call(backend, backend.enable_vertex_attrib_array, 0)
        _call(backend, backend.vertex_attrib_pointer, 0, 3, GL_FLOAT, GL_FALSE, 0, 0)

        self.texture = _call(backend, backend.gen_texture)
        _call(backend, backend.bind_texture, GL_TEXTURE_CUBE_MAP, self.texture)
        for offset, face in enumerate(self.faces):
            _call(
                backend,
                backend.tex_image_2d,
                GL_TEXTURE_CUBE_MAP_POSITIVE_X + offset,
                0,
                GL_RGBA8,
                face.width,
                face.height,
                0,
                GL_BGRA,
                GL_UNSIGNED_BYTE,
                face.data,
            )
        for name, value in (
            (GL_TEXTURE_MAG_FILTER, GL_LINEAR),
            (GL_TEXTURE_MIN_FILTER, GL_LINEAR),
            (GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE),
            (GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE),
            (GL_TEXTURE_WRAP_R, GL_CLAMP_TO_EDGE),
        ):
            _call(backend, backend.tex_parameter, GL_TEXTURE_CUBE_MAP, name, value)

    def render(self, backend: Any) -> None:
        """Draw the cube without writing to the depth buffer."""
        if self.vertex_array is None:
            raise RuntimeError("skybox has not been uploaded")
        _call(backend, backend.bind_vertex_array, self.vertex_array)
        _call(backend, backend.bind_buffer, GL_ARRAY_BUFFER, self.vertex_buffer)
        _call(backend, backend.bind_buffer, GL_ELEMENT_ARRAY_BUFFER, self.index_buffer)
        _call(backend, backend.bind_texture, GL_TEXTURE_CUBE_MAP, self.texture)
        _call(backend, backend.depth_mask, GL_FALSE)
        _call(backend, backend.draw_elements, GL_TRIANGLES, len(INDICES), GL_UNSIGNED_INT, 0)
        _call(backend, backend.depth_mask, GL_TRUE)


def load_skybox(root: str | os.PathLike[str] = ".") -> Skybox:
    """Read the six face images found under ``root``."""
    return Skybox([read_bmp(os.path.join(root, name)) for name in FACE_FILES])