"""A flat directory mapping short file names to file header sectors."""

from __future__ import annotations

import errno
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

FILE_NAME_MAX_LEN = 9
"""Longest file name kept; longer names are truncated to this length."""

_ENCODING = "latin-1"


def _key(name: str) -> str:
    """Return the part of ``name`` that is stored and compared."""
    return name[:FILE_NAME_MAX_LEN]


@dataclass
class DirectoryEntry:
    """One slot of a directory: a file name and its header's sector."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(
        f"<?3xi{FILE_NAME_MAX_LEN + 1}s2x"
    )
    SIZE: ClassVar[int] = _LAYOUT.size

    in_use: bool = False
    sector: int = 0
    name: str = ""

    def pack(self) -> bytes:
        """Encode the entry as it is stored on disk."""
        raw_name = _key(self.name).encode(_ENCODING)
        return self._LAYOUT.pack(self.in_use, self.sector, raw_name)

    @classmethod
    def from_bytes(cls, data: bytes) -> DirectoryEntry:
        """Decode an entry from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ValueError("directory entry data is too short")
        in_use, sector, raw_name = cls._LAYOUT.unpack_from(data)
        name = raw_name.split(b"\0", 1)[0].decode(_ENCODING)
        return cls(in_use, sector, name)


class Directory:
    """A fixed-size table of directory entries.

    The caller provides mutual exclusion.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("directory size must not be negative")
        self._table = [DirectoryEntry() for _ in range(size)]

    @property
    def size(self) -> int:
        """Number of entries the directory can hold."""
        return len(self._table)

    @property
    def byte_size(self) -> int:
        """Number of bytes the directory occupies on disk."""
        return len(self._table) * DirectoryEntry.SIZE

    def fetch_from(self, file: BinaryIO) -> None:
        """Read the directory contents from the start of ``file``.

        Entries beyond the end of the data read are left unchanged.
        """
        file.seek(0)
        data = file.read(self.byte_size) or b""
        complete = len(data) // DirectoryEntry.SIZE
        for slot in range(complete):
            offset = slot * DirectoryEntry.SIZE
            self._table[slot] = DirectoryEntry.from_bytes(
                data[offset:offset + DirectoryEntry.SIZE]
            )

    def write_back(self, file: BinaryIO) -> None:
        """Write the directory contents to the start of ``file``."""
        file.seek(0)
        file.write(b"".join(entry.pack() for entry in self._table))

    def _find_entry(self, name: str) -> DirectoryEntry | None:
        key = _key(name)
        return next(
            (e for e in self._table if e.in_use and _key(e.name) == key), None
        )

    def find(self, name: str) -> int | None:
        """Return the header sector of the file ``name``, or None."""
        entry = self._find_entry(name)
        return entry.sector if entry is not None else None

    def add(self, name: str, sector: int) -> None:
        """Record the file ``name`` with its header at ``sector``.

        Raises FileExistsError if the name is already present and OSError
        (ENOSPC) if every entry is in use.
        """
        if self._find_entry(name) is not None:
            raise FileExistsError(errno.EEXIST, "file already exists", name)
        for entry in self._table:
            if not entry.in_use:
                entry.in_use = True
                entry.name = _key(name)
                entry.sector = sector
                return
        raise OSError(errno.ENOSPC, "directory is full", name)

    def remove(self, name: str) -> None:
        """Remove the file ``name``; raise FileNotFoundError if absent."""
        entry = self._find_entry(name)
        if entry is None:
            raise FileNotFoundError(errno.ENOENT, "no such file", name)
        entry.in_use = False

    def list(self) -> list[str]:
        """Return the names of all files in the directory, in table order."""
        return [entry.name for entry in self._table if entry.in_use]

    def __iter__(self) -> Iterator[tuple[str, int]]:
        """Iterate over the (name, sector) pairs of the files present."""
        return ((e.name, e.sector) for e in self._table if e.in_use)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._find_entry(name) is not None

    def __len__(self) -> int:
        return sum(1 for entry in self._table if entry.in_use)