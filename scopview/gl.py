"""Rendering backend interface, error checking and texture upload."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any, Protocol

from scopview.bmp import read_bmp

GL_NO_ERROR = 0
GL_UNSIGNED_BYTE = 0x1401
GL_TEXTURE_2D = 0x0DE1
GL_NEAREST = 0x2600
GL_TEXTURE_MAG_FILTER = 0x2800
GL_TEXTURE_MIN_FILTER = 0x2801
GL_TEXTURE_WRAP_S = 0x2802
GL_TEXTURE_WRAP_T = 0x2803
GL_RGBA8 = 0x8058
GL_BGRA = 0x80E1
GL_CLAMP_TO_EDGE = 0x812F
GL_TEXTURE0 = 0x84C0


class GLBackend(Protocol):
    """The graphics calls the viewer issues."""

    def get_error(self) -> int: ...

    def gen_texture(self) -> int: ...

    def active_texture(self, unit: int) -> None: ...

    def bind_texture(self, target: int, texture: int) -> None: ...

    def tex_parameter(self, target: int, name: int, value: int) -> None: ...

    def tex_image_2d(
        self,
        target: int,
        level: int,
        internal_format: int,
        width: int,
        height: int,
        border: int,
        pixel_format: int,
        pixel_type: int,
        pixels: bytes,
    ) -> None: ...


class GLError(RuntimeError):
    """A graphics call left an error code behind."""

    def __init__(self, code: int, function: str) -> None:
        super().__init__(f"[OpenGL Error] ({code}): {function}")
        self.code = code
        self.function = function


def clear_errors(backend: GLBackend) -> None:
    """Discard every pending error code."""
    while backend.get_error() != GL_NO_ERROR:
        pass


def check_errors(backend: GLBackend, function: str) -> None:
    """Raise ``GLError`` if ``function`` left an error code pending."""
    error = backend.get_error()
    if error != GL_NO_ERROR:
        raise GLError(error, function)


def _call(backend: GLBackend, function: Callable[..., Any], *args: Any) -> Any:
    clear_errors(backend)
    result = function(*args)
    check_errors(backend, function.__name__)
    return result


def load_texture(backend: GLBackend, path: str | os.PathLike[str], unit: int) -> int:
    """Upload a BMP image as a 2D texture on ``unit`` and return its id."""
    image = read_bmp(path)
    texture = _call(backend, backend.gen_texture)
    _call(backend, backend.active_texture, GL_TEXTURE0 + unit)
    _call(backend, backend.bind_texture, GL_TEXTURE_2D, texture)
    for name, value in (
        (GL_TEXTURE_MIN_FILTER, GL_NEAREST),
        (GL_TEXTURE_MAG_FILTER, GL_NEAREST),
        (GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE),
        (GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE),
    ):
        _call(backend, backend.tex_parameter, GL_TEXTURE_2D, name, value)
    _call(
        backend,
        backend.tex_image_2d,
        GL_TEXTURE_2D,
        0,
        GL_RGBA8,
        image.width,
        image.height,
        0,
        GL_BGRA,
        GL_UNSIGNED_BYTE,
        image.data,
    )
    return texture