"""Indexed-colour images, sprites that refer to them, and animation state."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from typing import Union

from PIL import Image as _PILImage

from .palette import PALETTE_BANK_SIZE, PaletteEntry

COLOR_TYPE_GRAYSCALE = 0
COLOR_TYPE_TRUECOLOR = 2
COLOR_TYPE_INDEXED = 3
COLOR_TYPE_GRAYSCALE_ALPHA = 4
COLOR_TYPE_TRUECOLOR_ALPHA = 6

_CHANNELS = {
    COLOR_TYPE_GRAYSCALE: 1,
    COLOR_TYPE_INDEXED: 1,
    COLOR_TYPE_TRUECOLOR: 3,
    COLOR_TYPE_GRAYSCALE_ALPHA: 2,
    COLOR_TYPE_TRUECOLOR_ALPHA: 4,
}

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class ImageError(Exception):
    """An image could not be loaded."""


def bytes_per_pixel(mode: int, bit_depth: int) -> int:
    """Bytes per pixel for a PNG colour type and bit depth; 0 if invalid."""
    channels = _CHANNELS.get(mode)
    if channels is None:
        return 0
    return (channels * bit_depth + 7) // 8


def _read_ihdr(path: Union[str, os.PathLike]) -> tuple[int, int, int, int]:
    try:
        with open(path, "rb") as handle:
            head = handle.read(33)
    except OSError as exc:
        raise ImageError(f"Failed to open file: {os.fspath(path)}") from exc
    if len(head) < 33 or not head.startswith(_PNG_SIGNATURE) or head[12:16] != b"IHDR":
        raise ImageError("Failed to get IHDR")
    return struct.unpack(">IIBB", head[16:26])


def _blank_palette() -> list[PaletteEntry]:
    return [PaletteEntry()] * PALETTE_BANK_SIZE


@dataclass(eq=False)
class Image:
    """An indexed-colour image: one palette index per pixel."""

    width: int = 0
    height: int = 0
    palette: list[PaletteEntry] = field(default_factory=_blank_palette)
    pixels: bytearray = field(default_factory=bytearray)
    bpp: int = 0
    pitch: int = 0
    _disposed: bool = field(init=False, repr=False, default=True)

    def __post_init__(self) -> None:
        self.pixels = bytearray(self.pixels)
        self._disposed = not self.pixels

    @property
    def disposed(self) -> bool:
        """Whether the pixel data has been released."""
        return self._disposed

    def load(self, path: Union[str, os.PathLike]) -> None:
        """Load an indexed-colour PNG file."""
        width, height, bit_depth, color_type = _read_ihdr(path)
        if color_type != COLOR_TYPE_INDEXED:
            raise ImageError("Image is not indexed color")
        try:
            with _PILImage.open(path) as picture:
                picture.load()
                if picture.mode != "P":
                    raise ImageError("Failed to decode image")
                flat = picture.getpalette() or []
                pixels = picture.tobytes()
        except (OSError, SyntaxError, ValueError) as exc:
            raise ImageError("Failed to decode image") from exc
        if not flat:
            raise ImageError("Failed to get PLTE chunk")

        palette = _blank_palette()
        rgb = list(zip(flat[0::3], flat[1::3], flat[2::3]))[:PALETTE_BANK_SIZE]
        palette[:len(rgb)] = [PaletteEntry(r, g, b) for r, g, b in rgb]

        self.width = width
        self.height = height
        self.palette = palette
        self.pixels = bytearray(pixels)
        self.bpp = bytes_per_pixel(color_type, bit_depth)
        self.pitch = width * self.bpp
        self._disposed = False

    def dispose(self) -> None:
        """Release the pixel data; repeated calls do nothing."""
        if self._disposed:
            return
        self.pixels = bytearray()
        self._disposed = True


@dataclass
class Sprite:
    """A rectangular region of an image."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0
    image: Image | None = None


@dataclass
class Animator:
    """Current frame of the current animation."""

    frame_id: int = 0
    animation_id: int = 0