"""A small INI reader and writer with the engine's parsing rules.

Keys keep every character up to the ``=`` sign (trailing spaces included),
values stop at the first tab or line break, and lines beginning with ``#``
are skipped.
"""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from os import PathLike
from typing import Optional, Union

__all__ = ["ItemType", "ConfigItem", "IniParser"]

_SECTION_RE = re.compile(r"\[([^\[\]]+)")
_KEY_RE = re.compile(r"([^;=]+)=")
_VALUE_RE = re.compile(r"[^\t\r\n]+")
_C_SPACE = " \t\n\v\f\r"
_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?"
    r"|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _c_atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _c_atof(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else 0.0


class ItemType(IntEnum):
    """How an item's value was set, which decides how it is written."""

    STRING = 0
    INT = 1
    FLOAT = 2
    BOOL = 3
    COMMENT = 4


@dataclass
class ConfigItem:
    """One key/value entry (or comment) of an INI document."""

    section: str = ""
    key: str = ""
    value: str = ""
    has_section: bool = False
    type: ItemType = ItemType.STRING


@dataclass
class IniParser:
    """An ordered list of INI items with typed accessors."""

    items: list[ConfigItem] = field(default_factory=list)

    @classmethod
    def load(cls, path: Union[str, PathLike]) -> "IniParser":
        """Read and parse the file at ``path``; raises ``OSError`` if it cannot be opened."""
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            return cls.parse(handle.read())

    @classmethod
    def parse(cls, text: str) -> "IniParser":
        """Parse INI text into a new parser."""
        parser = cls()
        section = ""
        has_section = False
        for line in text.split("\n"):
            if line.startswith("#"):
                continue
            if line.startswith("["):
                match = _SECTION_RE.match(line)
                if match:
                    section = match.group(1)
                    has_section = True
                    continue
            entry = cls._parse_entry(line)
            if entry is None:
                continue
            key, value = entry
            parser.items.append(
                ConfigItem(
                    section=section if has_section else "",
                    key=key,
                    value=value,
                    has_section=has_section,
                )
            )
        return parser

    @staticmethod
    def _parse_entry(line: str) -> Optional[tuple[str, str]]:
        match = _KEY_RE.match(line)
        if not match:
            return None
        rest = line[match.end():]
        value = _VALUE_RE.match(rest.lstrip(_C_SPACE)) or _VALUE_RE.match(rest)
        if not value:
            return None
        return match.group(1), value.group(0)

    def _find(self, section: str, key: str) -> Optional[ConfigItem]:
        return next(
            (item for item in self.items if item.section == section and item.key == key),
            None,
        )

    def get_string(self, section: str, key: str) -> Optional[str]:
        """Return the raw value, or ``None`` if the key is absent."""
        item = self._find(section, key)
        return item.value if item else None

    def get_integer(self, section: str, key: str) -> Optional[int]:
        """Return the value's leading integer (0 if none), or ``None`` if absent."""
        item = self._find(section, key)
        return _c_atoi(item.value) if item else None

    def get_float(self, section: str, key: str) -> Optional[float]:
        """Return the value's leading number at single precision, or ``None`` if absent."""
        item = self._find(section, key)
        return _to_float32(_c_atof(item.value)) if item else None

    def get_bool(self, section: str, key: str) -> Optional[bool]:
        """Return whether the value is ``true`` (any case) or ``1``; ``None`` if absent."""
        item = self._find(section, key)
        if item is None:
            return None
        return item.value.lower() == "true" or item.value == "1"

    def _set(self, section: str, key: str, value: str, item_type: ItemType) -> None:
        item = self._find(section, key)
        if item is None:
            item = ConfigItem()
            self.items.append(item)
        item.section = section
        item.key = key
        item.value = value
        item.type = item_type

    def set_string(self, section: str, key: str, value: str) -> None:
        """Set a string value, replacing any existing entry."""
        self._set(section, key, value, ItemType.STRING)

    def set_integer(self, section: str, key: str, value: int) -> None:
        """Set an integer value."""
        self._set(section, key, str(int(value)), ItemType.INT)

    def set_float(self, section: str, key: str, value: float) -> None:
        """Set a single-precision value written with six decimals."""
        self._set(section, key, f"{_to_float32(float(value)):f}", ItemType.FLOAT)

    def set_bool(self, section: str, key: str, value: bool) -> None:
        """Set a boolean value written as ``true`` or ``false``."""
        self._set(section, key, "true" if value else "false", ItemType.BOOL)

    def set_comment(self, section: str, key: str, comment: str) -> None:
        """Set a comment entry, written as ``; comment``."""
        self._set(section, key, comment, ItemType.COMMENT)

    @staticmethod
    def _format_item(item: ConfigItem) -> str:
        if item.type == ItemType.COMMENT:
            return f"; {item.value}\n"
        return f"{item.key}={item.value}\n"

    def _section_order(self) -> list[str]:
        sections: list[str] = []
        previous = ""
        for item in self.items:
            if item.section != previous:
                previous = item.section
                sections.append(item.section)
        if len(sections) > 1 and sections[0] == sections[-1]:
            sections.pop()
        return sections

    def dumps(self) -> str:
        """Render the items as INI text."""
        parts = [self._format_item(item) for item in self.items if item.section == ""]
        parts.append("\n")
        sections = self._section_order()
        for position, name in enumerate(sections):
            parts.append(f"[{name}]\n")
            parts.extend(self._format_item(item) for item in self.items if item.section == name)
            if position + 1 < len(sections):
                parts.append("\n")
        return "".join(parts)

    def write(self, path: Union[str, PathLike]) -> None:
        """Write the rendered text to ``path``."""
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            handle.write(self.dumps())