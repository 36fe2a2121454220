import struct

import pytest

from scopview.gl import (
    GL_BGRA,
    GL_NEAREST,
    GL_RGBA8,
    GL_TEXTURE0,
    GL_TEXTURE_2D,
    GL_TEXTURE_MIN_FILTER,
    GL_UNSIGNED_BYTE,
    GLError,
    check_errors,
    clear_errors,
    load_texture,
)

INVALID_ENUM = 0x0500
INVALID_VALUE = 0x0501


class FakeBackend:
    def __init__(self, errors=(), fail_on=None):
        self.errors = list(errors)
        self.calls = []
        self.fail_on = fail_on

    def get_error(self):
        return self.errors.pop(0) if self.errors else 0

    def _record(self, name, *args):
        self.calls.append((name, args))
        if name == self.fail_on:
            self.errors.append(INVALID_VALUE)

    def gen_texture(self):
        self._record("gen_texture")
        return 7

    def active_texture(self, unit):
        self._record("active_texture", unit)

    def bind_texture(self, target, texture):
        self._record("bind_texture", target, texture)

    def tex_parameter(self, target, name, value):
        self._record("tex_parameter", target, name, value)

    def tex_image_2d(self, *args):
        self._record("tex_image_2d", *args)


def write_bmp(path):
    pixels = bytes([1, 2, 3, 4])
    offset = 54
    header = b"BM" + struct.pack("<IHHI", offset + len(pixels), 0, 0, offset)
    info = struct.pack("<IiiHHIIiiII", 40, 1, 1, 1, 32, 0, len(pixels), 0, 0, 0, 0)
    path.write_bytes(header + info + pixels)
    return path


def test_clear_errors_drains_queue():
    backend = FakeBackend([INVALID_ENUM, INVALID_VALUE])
    clear_errors(backend)
    assert backend.errors == []


def test_check_errors_raises_first_error_only():
    backend = FakeBackend([INVALID_ENUM, INVALID_VALUE])
    with pytest.raises(GLError) as info:
        check_errors(backend, "draw")
    assert info.value.code == INVALID_ENUM
    assert info.value.function == "draw"
    assert "draw" in str(info.value)
    assert backend.errors == [INVALID_VALUE]


def test_load_texture_uploads_image(tmp_path):
    backend = FakeBackend([INVALID_ENUM])
    texture = load_texture(backend, write_bmp(tmp_path / "tex.bmp"), 3)
    assert texture == 7
    assert ("active_texture", (GL_TEXTURE0 + 3,)) in backend.calls
    assert ("bind_texture", (GL_TEXTURE_2D, 7)) in backend.calls
    assert ("tex_parameter", (GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_NEAREST)) in backend.calls
    name, args = backend.calls[-1]
    assert name == "tex_image_2d"
    assert args == (
        GL_TEXTURE_2D, 0, GL_RGBA8, 1, 1, 0, GL_BGRA, GL_UNSIGNED_BYTE, bytes([1, 2, 3, 4]),
    )


def test_load_texture_reports_failed_call(tmp_path):
    backend = FakeBackend(fail_on="tex_image_2d")
    with pytest.raises(GLError) as info:
        load_texture(backend, write_bmp(tmp_path / "tex.bmp"), 0)
    assert info.value.function == "tex_image_2d"
    assert info.value.code == INVALID_VALUE


def test_load_texture_missing_image(tmp_path):
    backend = FakeBackend()
    with pytest.raises(OSError, match="failed to open image"):
        load_texture(backend, tmp_path / "absent.bmp", 0)
    assert backend.calls == []