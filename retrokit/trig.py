"""Fixed-point trigonometry lookup tables and accessors."""

from __future__ import annotations

import math
import struct

__all__ = [
    "SIN_M_TABLE",
    "COS_M_TABLE",
    "SIN512_TABLE",
    "COS512_TABLE",
    "SIN256_TABLE",
    "COS256_TABLE",
    "ARC_TAN_TABLE",
    "sin512",
    "cos512",
    "sin256",
    "cos256",
    "arc_tan_lookup",
]


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _build_m_tables() -> tuple[tuple[int, ...], tuple[int, ...]]:
    sines = [int(math.sin((i / 256.0) * math.pi) * 4096.0) for i in range(0x200)]
    cosines = [int(math.cos((i / 256.0) * math.pi) * 4096.0) for i in range(0x200)]
    for index, sin_value, cos_value in ((0x00, 0, 0x1000), (0x80, 0x1000, 0), (0x100, 0, -0x1000), (0x180, -0x1000, 0)):
        sines[index] = sin_value
        cosines[index] = cos_value
    return tuple(sines), tuple(cosines)


def _build_512_tables() -> tuple[tuple[int, ...], tuple[int, ...]]:
    sines = []
    cosines = []
    for i in range(0x200):
        angle = _f32((i / 256.0) * math.pi)
        sines.append(int(_f32(math.sin(angle)) * 512.0))
        cosines.append(int(_f32(math.cos(angle)) * 512.0))
    for index, sin_value, cos_value in ((0x00, 0, 0x200), (0x80, 0x200, 0), (0x100, 0, -0x200), (0x180, -0x200, 0)):
        sines[index] = sin_value
        cosines[index] = cos_value
    return tuple(sines), tuple(cosines)


def _build_arc_tan_table() -> bytes:
    scale = _f32(40.743664)
    table = bytearray(0x100 * 0x100)
    for x in range(0x100):
        row = x << 8
        for y in range(0x100):
            angle = _f32(math.atan2(y, x))
            table[row + y] = int(_f32(angle * scale)) & 0xFF
    return bytes(table)


SIN_M_TABLE, COS_M_TABLE = _build_m_tables()
SIN512_TABLE, COS512_TABLE = _build_512_tables()
SIN256_TABLE = tuple(SIN512_TABLE[i * 2] >> 1 for i in range(0x100))
COS256_TABLE = tuple(COS512_TABLE[i * 2] >> 1 for i in range(0x100))
ARC_TAN_TABLE = _build_arc_tan_table()


def _wrap(angle: int, period: int) -> int:
    if angle < 0:
        angle = period - angle
    return angle & (period - 1)


def sin512(angle: int) -> int:
    """Sine scaled to 512, for a 512-step circle."""
    return SIN512_TABLE[_wrap(angle, 0x200)]


def cos512(angle: int) -> int:
    """Cosine scaled to 512, for a 512-step circle."""
    return COS512_TABLE[_wrap(angle, 0x200)]


def sin256(angle: int) -> int:
    """Sine scaled to 256, for a 256-step circle."""
    return SIN256_TABLE[_wrap(angle, 0x100)]


def cos256(angle: int) -> int:
    """Cosine scaled to 256, for a 256-step circle."""
    return COS256_TABLE[_wrap(angle, 0x100)]


def arc_tan_lookup(x: int, y: int) -> int:
    """Angle of the vector (x, y) as a byte, 256 steps per turn."""
    ax = abs(x)
    ay = abs(y)
    while max(ax, ay) > 0xFF:
        ax >>= 4
        ay >>= 4
    value = ARC_TAN_TABLE[(ax << 8) + ay]
    if x <= 0:
        if y <= 0:
            return (value - 0x80) & 0xFF
        return (-0x80 - value) & 0xFF
    if y <= 0:
        return -value & 0xFF
    return value