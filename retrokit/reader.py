"""Reading files from plain folders and from encrypted data packs.

A data pack starts with a header: its size (4 bytes), a directory count
(2 bytes) and one entry per directory holding the masked directory name and
the offset of its file table.  Each file record holds an inverted file name,
a 4-byte size and the file's bytes, scrambled with a rolling two-key cipher.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import BinaryIO, Mapping, Optional, Union

__all__ = [
    "FileInfo",
    "Cipher",
    "DataPack",
    "FileReader",
    "open_plain_file",
    "build_pack",
    "copy_file_path",
]

_KEY_A = b"4RaS9D7KaEbxcp2o5r6t"
_KEY_B = b"3tRaUxLmEaSn"
_U32 = struct.Struct("<I")
_HEAD = struct.Struct("<IH")


@dataclass
class FileInfo:
    """A snapshot of an open file's name, sizes, position and cipher state."""

    file_name: str
    file_size: int
    v_file_size: int
    read_pos: int
    virtual_file_offset: int
    e_string_pos_a: int = 0
    e_string_pos_b: int = 0
    e_string_no: int = 0
    e_nybble_swap: bool = False
    encrypted: bool = False


class Cipher:
    """The rolling cipher used for file contents inside a data pack."""

    def __init__(self, file_size: int) -> None:
        self.string_no = (file_size & 0x1FC) >> 2
        self.pos_b = self.string_no % 9 + 1
        self.pos_a = self.string_no % self.pos_b + 1
        self.nybble_swap = False

    def _step(self) -> None:
        if self.pos_a <= 19 or self.pos_b <= 11:
            if self.pos_a > 19:
                self.pos_a = 1
                self.nybble_swap = not self.nybble_swap
            if self.pos_b > 11:
                self.pos_b = 1
                self.nybble_swap = not self.nybble_swap
            return
        self.string_no = (self.string_no + 1) & 0x7F
        if self.nybble_swap:
            self.nybble_swap = False
            self.pos_a = self.string_no % 12 + 6
            self.pos_b = self.string_no % 5 + 4
        else:
            self.nybble_swap = True
            self.pos_a = self.string_no % 15 + 3
            self.pos_b = self.string_no % 7 + 1

    @staticmethod
    def _swap(value: int) -> int:
        return ((value & 0x0F) << 4) | (value >> 4)

    def decrypt_byte(self, value: int) -> int:
        """Decode one byte and move the cipher on by one position."""
        data = (value ^ _KEY_B[self.pos_b] ^ self.string_no) & 0xFF
        self.pos_b += 1
        if self.nybble_swap:
            data = self._swap(data)
        data ^= _KEY_A[self.pos_a]
        self.pos_a += 1
        self._step()
        return data

    def encrypt_byte(self, value: int) -> int:
        """Encode one byte so that ``decrypt_byte`` restores it."""
        data = (value & 0xFF) ^ _KEY_A[self.pos_a]
        self.pos_a += 1
        if self.nybble_swap:
            data = self._swap(data)
        data ^= _KEY_B[self.pos_b] ^ self.string_no
        self.pos_b += 1
        self._step()
        return data & 0xFF

    def advance(self, count: int) -> None:
        """Move the cipher on by ``count`` bytes without decoding anything."""
        if count < 0:
            raise ValueError("cannot move the cipher backwards")
        for _ in range(count):
            self.pos_a += 1
            self.pos_b += 1
            self._step()


def _read_exact(handle: BinaryIO, count: int) -> bytes:
    data = handle.read(count)
    if len(data) != count:
        raise ValueError("data pack is truncated")
    return data


def _split_path(file_path: str) -> Optional[tuple[bytes, bytes]]:
    directory, slash, name = file_path.rpartition("/")
    if not slash:
        return None
    return (directory + "/").encode("utf-8"), name.encode("utf-8")


class FileReader:
    """A readable view of one file, plain or inside a data pack."""

    def __init__(
        self,
        handle: BinaryIO,
        name: str,
        *,
        offset: int,
        size: int,
        container_size: int,
        encrypted: bool,
    ) -> None:
        self.name = name
        self.size = size
        self._handle = handle
        self._offset = offset
        self._container_size = container_size
        self._encrypted = encrypted
        self._position = 0
        self._cipher = Cipher(size) if encrypted else None

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes from the current position."""
        if size < 0:
            raise ValueError("size must not be negative")
        start = self._offset + self._position
        count = min(size, max(0, self._container_size - start))
        self._handle.seek(start)
        data = self._handle.read(count)
        if self._cipher is not None:
            data = bytes(map(self._cipher.decrypt_byte, data))
        self._position += len(data)
        return data

    def tell(self) -> int:
        """Position relative to the start of the file."""
        return self._position

    def seek(self, position: int) -> None:
        """Move to ``position`` bytes from the start of the file."""
        if position < 0:
            raise ValueError("position must not be negative")
        self._position = position
        if self._encrypted:
            self._cipher = Cipher(self.size)
            self._cipher.advance(position)

    def at_end(self) -> bool:
        """Whether the position has reached the file's size."""
        return self._position >= self.size

    def get_info(self) -> FileInfo:
        """Snapshot of the reader's state."""
        cipher = self._cipher
        return FileInfo(
            file_name=self.name,
            file_size=self._container_size,
            v_file_size=self.size,
            read_pos=self._offset + self._position,
            virtual_file_offset=self._offset,
            e_string_pos_a=cipher.pos_a if cipher else 0,
            e_string_pos_b=cipher.pos_b if cipher else 0,
            e_string_no=cipher.string_no if cipher else 0,
            e_nybble_swap=cipher.nybble_swap if cipher else False,
            encrypted=self._encrypted,
        )

    def close(self) -> None:
        """Close the underlying handle."""
        self._handle.close()

    def __enter__(self) -> "FileReader":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class DataPack:
    """An encrypted data pack opened from disk."""

    def __init__(self, path: Union[str, PathLike]) -> None:
        self.path = Path(path)
        directories: list[tuple[bytes, int]] = []
        with open(self.path, "rb") as handle:
            self.size = handle.seek(0, os.SEEK_END)
            handle.seek(0)
            self.header_size, count = _HEAD.unpack(_read_exact(handle, _HEAD.size))
            for _ in range(count):
                length = _read_exact(handle, 1)[0]
                mask = 0xFF - length
                name = bytes(b ^ mask for b in _read_exact(handle, length))
                (offset,) = _U32.unpack(_read_exact(handle, 4))
                directories.append((name, offset))
        self._directories = directories

    @property
    def directories(self) -> list[str]:
        """Directory names in header order."""
        return [name.decode("utf-8", "replace") for name, _ in self._directories]

    def locate(self, file_path: str) -> Optional[tuple[int, int]]:
        """Return ``(data offset, size)`` of a packed file, or ``None``."""
        parts = _split_path(file_path)
        if parts is None:
            return None
        dir_name, target = parts
        index = next((i for i, (name, _) in enumerate(self._directories) if name == dir_name), None)
        if index is None:
            return None
        if index == len(self._directories) - 1:
            next_offset = self.size - self.header_size
        else:
            next_offset = self._directories[index + 1][1]
        boundary = next_offset + self.header_size
        position = self._directories[index][1] + self.header_size
        with open(self.path, "rb") as handle:
            while True:
                handle.seek(position)
                length_raw = handle.read(1)
                if not length_raw:
                    return None
                length = length_raw[0]
                raw_name = handle.read(length)
                raw_size = handle.read(4)
                if len(raw_name) != length or len(raw_size) != 4:
                    return None
                name = bytes(~b & 0xFF for b in raw_name)
                (size,) = _U32.unpack(raw_size)
                position += 1 + length + 4
                found = name == target
                if not found:
                    position += size
                if position >= boundary:
                    return None
                if found:
                    return position, size

    def open(self, file_path: str) -> FileReader:
        """Open a packed file; raises ``FileNotFoundError`` if it is absent."""
        location = self.locate(file_path)
        if location is None:
            raise FileNotFoundError(f"{file_path!r} is not in {self.path}")
        offset, size = location
        handle = open(self.path, "rb")
        return FileReader(
            handle,
            file_path,
            offset=offset,
            size=size,
            container_size=self.size,
            encrypted=True,
        )


def open_plain_file(path: Union[str, PathLike]) -> FileReader:
    """Open a regular file for reading; raises ``OSError`` on failure."""
    handle = open(path, "rb")
    size = os.fstat(handle.fileno()).st_size
    return FileReader(handle, os.fspath(path), offset=0, size=size, container_size=size, encrypted=False)


def build_pack(files: Mapping[str, bytes]) -> bytes:
    """Build a data pack holding ``files`` (path to contents)."""
    groups: dict[bytes, list[tuple[bytes, bytes]]] = {}
    for file_path, data in files.items():
        parts = _split_path(file_path)
        if parts is None:
            raise ValueError(f"path {file_path!r} has no directory")
        dir_name, name = parts
        if len(dir_name) > 0xFF or len(name) > 0xFF:
            raise ValueError(f"path {file_path!r} has a name longer than 255 bytes")
        groups.setdefault(dir_name, []).append((name, bytes(data)))

    header_size = _HEAD.size + sum(1 + len(name) + 4 for name in groups)
    header = bytearray(_HEAD.pack(header_size, len(groups)))
    body = bytearray()
    for dir_name, entries in groups.items():
        mask = 0xFF - len(dir_name)
        header.append(len(dir_name))
        header.extend(b ^ mask for b in dir_name)
        header.extend(_U32.pack(len(body)))
        for name, data in entries:
            body.append(len(name))
            body.extend(~b & 0xFF for b in name)
            body.extend(_U32.pack(len(data)))
            cipher = Cipher(len(data))
            body.extend(cipher.encrypt_byte(b) for b in data)
    return bytes(header + body)


def copy_file_path(path: str) -> str:
    """Return ``path`` with forward slashes turned into backslashes."""
    return path.replace("/", "\\")