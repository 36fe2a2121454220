"""Reader for uncompressed 24 and 32 bit BMP images."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass

import numpy as np

from scopview.parser import check_file_extension

_FILE_HEADER = struct.Struct("<HIHHI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")
_SIGNATURE = 0x4D42  # "BM"
_INFO_SIZES = (40, 108, 124)
_DEPTHS = (24, 32)
_COMPRESSIONS = (0, 3)


@dataclass(eq=False)
class BMPImage:
    """Decoded image: ``pixels`` is BGRA, shape (height, width, 4), first row on top."""

    width: int
    height: int
    bits_per_pixel: int
    top_down: bool
    pixels: np.ndarray

    @property
    def data(self) -> bytes:
        """Pixel bytes in BGRA order, row by row from the top."""
        return self.pixels.tobytes()


def _decode(raw: bytes, name: str) -> BMPImage:
    if len(raw) < _FILE_HEADER.size:
        raise ValueError(f"{name}: incorrect file type")
    signature, _size, _reserved1, _reserved2, offset = _FILE_HEADER.unpack_from(raw, 0)
    if signature != _SIGNATURE:
        raise ValueError(f"{name}: incorrect file type")

    info = raw[_FILE_HEADER.size:_FILE_HEADER.size + _INFO_HEADER.size].ljust(_INFO_HEADER.size, b"\0")
    info_size, width, height, _planes, bpp, compression, *_ = _INFO_HEADER.unpack(info)
    if info_size not in _INFO_SIZES:
        raise ValueError(f"{name}: incorrect DIB format")
    if bpp not in _DEPTHS:
        raise ValueError(f"{name}: only 24 and 32 bits images are supported")
    if compression not in _COMPRESSIONS:
        raise ValueError(f"{name}: data compression is not supported")
    if width < 0:
        raise ValueError(f"{name}: invalid image width")

    top_down = height < 0
    height = abs(height)
    bytes_per_pixel = bpp // 8
    stride = width * bytes_per_pixel
    row_span = stride + stride % 4
    needed = height * row_span

    # Bytes missing at the end of the file leave their pixels at 0xFF.
    body = raw[offset:offset + needed].ljust(needed, b"\xff")
    rows = (
        np.frombuffer(body, dtype=np.uint8)
        .reshape(height, row_span)[:, :stride]
        .reshape(height, width, bytes_per_pixel)
    )
    pixels = np.full((height, width, 4), 0xFF, dtype=np.uint8)
    pixels[..., :bytes_per_pixel] = rows
    if not top_down:
        pixels = np.ascontiguousarray(pixels[::-1])
    return BMPImage(width, height, bpp, top_down, pixels)


def read_bmp(filename: str | os.PathLike[str]) -> BMPImage:
    """Load a .bmp file, raising ``ValueError`` for unsupported content."""
    name = os.fspath(filename)
    check_file_extension(name, ".bmp")
    try:
        with open(name, "rb") as handle:
            raw = handle.read()
    except OSError as exc:
        raise OSError(f"{name}: failed to open image") from exc
    return _decode(raw, name)