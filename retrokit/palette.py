"""Indexed colour palettes stored as packed 16-bit colours and RGB triples."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

__all__ = [
    "PALETTE_COUNT",
    "PALETTE_SIZE",
    "SCREEN_YSIZE",
    "RenderType",
    "PaletteEntry",
    "PaletteBank",
    "rgb888_to_rgb565",
    "rgb888_to_rgb5551",
]

PALETTE_COUNT = 0x8
PALETTE_SIZE = 0x100
SCREEN_YSIZE = 240


class RenderType(IntEnum):
    """How colours are packed: software (RGB565) or hardware (RGB5551)."""

    SW = 0
    HW = 1


@dataclass(frozen=True)
class PaletteEntry:
    """An 8-bit-per-channel colour."""

    r: int = 0
    g: int = 0
    b: int = 0


def rgb888_to_rgb565(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into a 16-bit RGB565 colour."""
    return ((b & 0xFF) >> 3) | (((g & 0xFF) >> 2) << 5) | (((r & 0xFF) >> 3) << 11)


def rgb888_to_rgb5551(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into a 16-bit RGB5551 colour with the alpha bit clear."""
    return (((b & 0xFF) >> 3) << 1) | (((g & 0xFF) >> 3) << 6) | (((r & 0xFF) >> 3) << 11)


class PaletteBank:
    """A set of palettes, the per-line palette selection and fade state."""

    def __init__(self, render_type: RenderType = RenderType.SW) -> None:
        self.render_type = RenderType(render_type)
        self.full_palette: list[list[int]] = [[0] * PALETTE_SIZE for _ in range(PALETTE_COUNT)]
        self.full_palette32: list[list[PaletteEntry]] = [
            [PaletteEntry() for _ in range(PALETTE_SIZE)] for _ in range(PALETTE_COUNT)
        ]
        self.line_buffer: list[int] = [0] * SCREEN_YSIZE
        self.active_id = 0
        self.tex_palette_num = 0
        self.palette_mode = 0
        self.fade_mode = 0
        self.fade_r = 0
        self.fade_g = 0
        self.fade_b = 0
        self.fade_a = 0

    @property
    def active_palette(self) -> list[int]:
        """The packed colours of the active palette."""
        return self.full_palette[self.active_id]

    @property
    def active_palette32(self) -> list[PaletteEntry]:
        """The RGB colours of the active palette."""
        return self.full_palette32[self.active_id]

    def _pack(self, r: int, g: int, b: int) -> int:
        if self.render_type == RenderType.HW:
            return rgb888_to_rgb5551(r, g, b)
        return rgb888_to_rgb565(r, g, b)

    def set_active_palette(self, palette_id: int, start_line: int, end_line: int) -> None:
        """Select ``palette_id`` for the lines ``start_line`` up to ``end_line``."""
        palette_id &= 0xFF
        if self.render_type == RenderType.SW:
            if palette_id < PALETTE_COUNT:
                for line in range(max(start_line, 0), min(end_line, SCREEN_YSIZE)):
                    self.line_buffer[line] = palette_id
            self.active_id = self.line_buffer[0]
        elif palette_id < PALETTE_COUNT:
            self.tex_palette_num = palette_id

    def set_entry(self, palette_index: Optional[int], index: int, r: int, g: int, b: int) -> None:
        """Set one colour; a ``palette_index`` of ``None``, -1 or 0xFF means the active palette."""
        index &= 0xFF
        r, g, b = r & 0xFF, g & 0xFF, b & 0xFF
        if palette_index is None or (palette_index & 0xFF) == 0xFF:
            packed_row = self.active_palette
            rgb_row = self.active_palette32
        else:
            packed_row = self.full_palette[palette_index & 0xFF]
            rgb_row = self.full_palette32[palette_index & 0xFF]
        packed = self._pack(r, g, b)
        if self.render_type == RenderType.HW and index:
            packed |= 1
        packed_row[index] = packed
        rgb_row[index] = PaletteEntry(r, g, b)

    def copy_palette(self, src: int, dest: int) -> None:
        """Copy every colour of palette ``src`` into palette ``dest``."""
        src &= 0xFF
        dest &= 0xFF
        if src < PALETTE_COUNT and dest < PALETTE_COUNT:
            self.full_palette[dest][:] = self.full_palette[src]
            self.full_palette32[dest][:] = self.full_palette32[src]

    def rotate_palette(self, start_index: int, end_index: int, right: bool) -> None:
        """Rotate the active palette's colours between the two indices by one place."""
        start = start_index & 0xFF
        end = end_index & 0xFF
        for row in (self.active_palette, self.active_palette32):
            if start < end:
                segment = row[start : end + 1]
                row[start : end + 1] = segment[-1:] + segment[:-1] if right else segment[1:] + segment[:1]
            elif right:
                row[start] = row[end]
            else:
                row[end] = row[start]

    def set_fade(self, r: int, g: int, b: int, a: int) -> None:
        """Start a full-screen fade towards the given colour."""
        a &= 0xFFFF
        self.fade_mode = 1
        self.fade_r = r & 0xFF
        self.fade_g = g & 0xFF
        self.fade_b = b & 0xFF
        self.fade_a = min(a, 0xFF)

    def set_limited_fade(
        self,
        palette_id: int,
        r: int,
        g: int,
        b: int,
        alpha: int,
        start_index: int,
        end_index: int,
    ) -> None:
        """Blend a range of ``palette_id``'s colours towards (r, g, b) and make it active."""
        palette_id &= 0xFF
        if palette_id >= PALETTE_COUNT:
            return
        self.palette_mode = 1
        self.active_id = palette_id
        alpha &= 0xFFFF
        if alpha >= 0x100:
            alpha = 0xFF
        if start_index >= end_index:
            return
        r, g, b = r & 0xFF, g & 0xFF, b & 0xFF
        inverse = 0xFF - alpha
        packed_row = self.active_palette
        rgb_row = self.active_palette32
        for i in range(start_index, end_index):
            entry = rgb_row[i]
            nr = ((r * alpha + inverse * entry.r) & 0xFFFF) >> 8
            ng = ((g * alpha + inverse * entry.g) & 0xFFFF) >> 8
            nb = ((b * alpha + inverse * entry.b) & 0xFFFF) >> 8
            packed_row[i] = self._pack(nr, ng, nb)
            if self.render_type == RenderType.HW:
                rgb_row[i] = PaletteEntry(nr, ng, nb)
                packed_row[i] |= 1

    def load_palette(
        self,
        data: bytes,
        palette_id: int,
        start_palette_index: int,
        start_index: int,
        end_index: int,
    ) -> None:
        """Load RGB triples ``start_index`` .. ``end_index`` of a palette file's bytes.

        The colours go to ``palette_id`` from ``start_palette_index`` on; palette 0
        (or an out-of-range id) means the active palette.
        """
        if start_index < 0 or end_index > len(data) // 3 and end_index > start_index:
            raise ValueError("palette data is too short for the requested range")
        if palette_id >= PALETTE_COUNT or palette_id < 0:
            palette_id = 0
        target = palette_id if palette_id else -1
        slot = start_palette_index
        for i in range(start_index, end_index):
            r, g, b = data[3 * i : 3 * i + 3]
            self.set_entry(target, slot & 0xFF, r, g, b)
            slot += 1