"""Byte-addressed little-endian memory of the simulated MIPS machine."""

from __future__ import annotations

MEMSIZE = 1 << 24
"""Default number of bytes of simulated memory."""

MEMOFFSET = 0x10000000
"""Default address of the first byte of simulated memory."""

_MASK = 0xFFFFFFFF


class MemoryError_(IndexError):
    """Raised when an access falls outside simulated memory."""


def _signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


class Memory:
    """A block of memory that starts at address ``offset``."""

    def __init__(self, size: int = MEMSIZE, offset: int = MEMOFFSET) -> None:
        if size <= 0:
            raise ValueError("memory size must be positive")
        self.size = size
        self.offset = offset
        self._data = bytearray(size)

    def _index(self, addr: int, length: int) -> int:
        index = (addr & _MASK) - self.offset
        if index < 0 or index + length > self.size:
            raise MemoryError_(f"address 0x{addr & _MASK:08x} is outside memory")
        return index

    def _get(self, addr: int, length: int) -> int:
        index = self._index(addr, length)
        return int.from_bytes(self._data[index:index + length], "little")

    def _put(self, addr: int, length: int, value: int) -> None:
        index = self._index(addr, length)
        mask = (1 << (8 * length)) - 1
        self._data[index:index + length] = (value & mask).to_bytes(length, "little")

    def fetch(self, addr: int) -> int:
        """Return the signed 32-bit word at ``addr``."""
        return _signed(self._get(addr, 4), 32)

    def sfetch(self, addr: int) -> int:
        """Return the signed 16-bit half word at ``addr``."""
        return _signed(self._get(addr, 2), 16)

    def usfetch(self, addr: int) -> int:
        """Return the unsigned 16-bit half word at ``addr``."""
        return self._get(addr, 2)

    def cfetch(self, addr: int) -> int:
        """Return the signed byte at ``addr``."""
        return _signed(self._get(addr, 1), 8)

    def ucfetch(self, addr: int) -> int:
        """Return the unsigned byte at ``addr``."""
        return self._get(addr, 1)

    def store(self, addr: int, value: int) -> None:
        """Store the low 32 bits of ``value`` at ``addr``."""
        self._put(addr, 4, value)

    def sstore(self, addr: int, value: int) -> None:
        """Store the low 16 bits of ``value`` at ``addr``."""
        self._put(addr, 2, value)

    def cstore(self, addr: int, value: int) -> None:
        """Store the low 8 bits of ``value`` at ``addr``."""
        self._put(addr, 1, value)

    def load(self, addr: int, data: bytes) -> None:
        """Copy ``data`` into memory starting at ``addr``."""
        index = self._index(addr, len(data))
        self._data[index:index + len(data)] = data

    def read_bytes(self, addr: int, length: int) -> bytes:
        """Return ``length`` bytes starting at ``addr``."""
        if length < 0:
            raise ValueError("length must not be negative")
        index = self._index(addr, length)
        return bytes(self._data[index:index + length])

    def read_cstring(self, addr: int) -> bytes:
        """Return the NUL-terminated byte string at ``addr``, without the NUL."""
        index = self._index(addr, 1)
        end = self._data.find(b"\0", index)
        if end == -1:
            raise MemoryError_("string runs past the end of memory")
        return bytes(self._data[index:end])