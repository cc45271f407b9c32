"""Small numeric helpers: angles, interpolation, clamping and byte order."""

from __future__ import annotations

import math
import sys
from enum import Enum

PI = 3.1415927
TAU = PI * 2.0
RIGHT = 0.0
LEFT = PI
UP = PI / -2
DOWN = PI / 2


class Endian(Enum):
    """Byte order of multi-byte values."""

    LITTLE = "little"
    BIG = "big"


def mod(x: float, m: float) -> float:
    """Remainder of ``x / m`` with the quotient truncated toward zero."""
    return x - int(x / m) * m


def sign(x):
    """Return -1, 0 or 1 in the type of ``x``."""
    if x == 0:
        return type(x)(0)
    return type(x)(-1 if x < 0 else 1)


def clamp(value, lo, hi):
    """Limit ``value`` to the range ``[lo, hi]``."""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a + (b - a) * t


def approach(t: float, target: float, delta: float) -> float:
    """Move ``t`` toward ``target`` by at most ``delta`` without overshooting."""
    if t < target:
        return min(t + delta, target)
    return max(t - delta, target)


def map_range(t: float, old_min: float, old_max: float,
              new_min: float, new_max: float) -> float:
    """Map ``t`` from one range onto another."""
    return new_min + ((t - old_min) / (old_max - old_min)) * (new_max - new_min)


def clamped_map(t: float, old_min: float, old_max: float,
                new_min: float, new_max: float) -> float:
    """Like :func:`map_range`, with ``t`` first clamped to the old range."""
    return map_range(clamp(t, old_min, old_max), old_min, old_max, new_min, new_max)


def repeat(value: float, length: float) -> float:
    """Wrap ``value`` into ``[0, length]``."""
    return clamp(value - math.floor(value / length) * length, 0.0, length)


def angle_diff(radians_a: float, radians_b: float) -> float:
    """Signed difference from angle ``a`` to angle ``b``."""
    return mod((radians_b - radians_a) + PI, TAU) - PI


def angle_lerp(radians_a: float, radians_b: float, p: float) -> float:
    """Interpolate between two angles along the shortest arc."""
    shortest = mod(mod(radians_b - radians_a, TAU) + (TAU + PI), TAU) - PI
    return radians_a + mod(shortest * p, TAU)


def is_little_endian() -> bool:
    """True when the host stores integers little-endian."""
    return sys.byteorder == "little"


def is_big_endian() -> bool:
    """True when the host stores integers big-endian."""
    return sys.byteorder == "big"


def is_endian(endian: Endian) -> bool:
    """True when ``endian`` matches the host byte order."""
    return (endian is Endian.LITTLE and is_little_endian()) or (
        endian is Endian.BIG and is_big_endian()
    )


def swap_endian(value: int, size: int) -> int:
    """Reverse the byte order of an unsigned ``size``-byte integer."""
    if size <= 0:
        raise ValueError("size must be positive")
    mask = (1 << (8 * size)) - 1
    return int.from_bytes((value & mask).to_bytes(size, "little"), "big")