"""Palette banks of RGB colours, JASC palette files and RGB565 packing."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Union

PALETTE_BANK_COUNT = 8
PALETTE_BANK_SIZE = 256

_COUNT_LINE = re.compile(r"\s*([+-]?\d+)")
_COLOR_LINE = re.compile(r"\s*([+-]?\d+)\s+([+-]?\d+)\s+([+-]?\d+)")


class PaletteError(Exception):
    """A palette file could not be read or parsed."""


@dataclass(frozen=True)
class PaletteEntry:
    """One RGB888 colour."""

    r: int = 0
    g: int = 0
    b: int = 0

    def packed(self) -> int:
        """The colour as a 16-bit RGB565 value."""
        return ((self.r & 0xF8) << 8) | ((self.g & 0xFC) << 3) | (self.b >> 3)


BLACK = PaletteEntry(0, 0, 0)


def rgb888_to_rgb565(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into a 16-bit RGB565 value."""
    return (b >> 3) | ((g >> 2) << 5) | ((r >> 3) << 11)


def load_jasc_palette(path: Union[str, os.PathLike]) -> list[PaletteEntry]:
    """Parse a JASC-PAL file into a list of colours."""
    try:
        with open(path, encoding="latin-1") as handle:
            lines = [line.rstrip("\r\n") for line in handle]
    except OSError as exc:
        raise PaletteError(f"Failed to open file: {os.fspath(path)}") from exc

    rows = iter(lines)
    if next(rows, "") != "JASC-PAL":
        raise PaletteError("Invalid JASC palette header")
    if next(rows, "") != "0100":
        raise PaletteError("Unsupported JASC palette version")

    match = _COUNT_LINE.match(next(rows, ""))
    if match is None:
        raise PaletteError("Invalid JASC palette color count")
    count = int(match.group(1))
    if count < 0:
        raise PaletteError("Invalid JASC palette color count")

    palette = []
    for number in range(count):
        line = next(rows, None)
        if line is None:
            raise PaletteError("Unexpected end of file in palette data")
        match = _COLOR_LINE.match(line)
        if match is None:
            raise PaletteError(f"Invalid color format on line {number + 4}")
        r, g, b = (int(value) & 0xFF for value in match.groups())
        palette.append(PaletteEntry(r, g, b))
    return palette


def _check(value: int, limit: int, what: str) -> int:
    if not 0 <= value < limit:
        raise IndexError(f"{what} {value} out of range 0..{limit - 1}")
    return value


class PaletteBanks:
    """A fixed set of palette banks, one of which is active."""

    def __init__(self) -> None:
        self.banks: list[list[PaletteEntry]] = [
            [BLACK] * PALETTE_BANK_SIZE for _ in range(PALETTE_BANK_COUNT)
        ]
        self.active_bank = 0

    def _bank(self, bank: int) -> list[PaletteEntry]:
        return self.banks[_check(bank, PALETTE_BANK_COUNT, "bank")]

    def load_bank(self, bank: int, path: Union[str, os.PathLike]) -> None:
        """Fill a bank from a JASC file, padding with black."""
        target = self._bank(bank)
        colors = load_jasc_palette(path)[:PALETTE_BANK_SIZE]
        target[:] = colors + [BLACK] * (PALETTE_BANK_SIZE - len(colors))

    def set_active(self, bank: int) -> None:
        """Make ``bank`` the bank used for drawing."""
        self.active_bank = _check(bank, PALETTE_BANK_COUNT, "bank")

    def active(self) -> list[PaletteEntry]:
        """The colours of the active bank."""
        return self.banks[self.active_bank]

    def rotate(self, bank: int, start_index: int, end_index: int,
               right: bool) -> None:
        """Rotate the colours from ``start_index`` to ``end_index`` by one."""
        colors = self._bank(bank)
        start = _check(start_index, PALETTE_BANK_SIZE, "index")
        end = _check(end_index, PALETTE_BANK_SIZE, "index")
        if end < start:
            if right:
                colors[start] = colors[end]
            else:
                colors[end] = colors[start]
            return
        segment = colors[start:end + 1]
        if right:
            colors[start:end + 1] = segment[-1:] + segment[:-1]
        else:
            colors[start:end + 1] = segment[1:] + segment[:1]

    def rotate_rel(self, bank: int, start_index: int, count: int,
                   right: bool) -> None:
        """Rotate ``count`` colours starting at ``start_index``."""
        self.rotate(bank, start_index, (start_index + count - 1) & 0xFF, right)

    def set_color(self, bank: int, index: int, color: PaletteEntry) -> None:
        """Replace one colour of a bank."""
        self._bank(bank)[_check(index, PALETTE_BANK_SIZE, "index")] = color