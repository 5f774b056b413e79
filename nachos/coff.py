"""Headers of MIPS little-endian COFF object files and of NOFF executables."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

MIPSELMAGIC = 0x0162
"""File header magic number of a little-endian MIPS object file."""

OMAGIC = 0o407
"""Optional header magic number of an impure (non-shared text) executable."""

SOMAGIC = 0x0701

NOFFMAGIC = 0xBADFAD
"""Magic number that opens every NOFF executable."""


class CoffFormatError(ValueError):
    """Raised when object file data is malformed or cannot be handled."""


def _unpack(layout: struct.Struct, data: bytes) -> tuple:
    if len(data) < layout.size:
        raise CoffFormatError("File is too short")
    return layout.unpack_from(data)


@dataclass(frozen=True)
class FileHeader:
    """The COFF file header."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<HHiiiHH")
    SIZE: ClassVar[int] = _LAYOUT.size

    magic: int = MIPSELMAGIC
    nscns: int = 0
    timdat: int = 0
    symptr: int = 0
    nsyms: int = 0
    opthdr: int = 0
    flags: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> FileHeader:
        """Decode the header from the start of ``data``."""
        return cls(*_unpack(cls._LAYOUT, data))

    def pack(self) -> bytes:
        """Encode the header as it is stored on disk."""
        return self._LAYOUT.pack(
            self.magic, self.nscns, self.timdat, self.symptr,
            self.nsyms, self.opthdr, self.flags,
        )


@dataclass(frozen=True)
class AoutHeader:
    """The COFF optional ("system") header."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<hh13I")
    SIZE: ClassVar[int] = _LAYOUT.size

    magic: int = OMAGIC
    vstamp: int = 0
    tsize: int = 0
    dsize: int = 0
    bsize: int = 0
    entry: int = 0
    text_start: int = 0
    data_start: int = 0
    bss_start: int = 0
    gprmask: int = 0
    cprmask: tuple[int, int, int, int] = (0, 0, 0, 0)
    gp_value: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> AoutHeader:
        """Decode the header from the start of ``data``."""
        values = _unpack(cls._LAYOUT, data)
        return cls(*values[:10], tuple(values[10:14]), values[14])

    def pack(self) -> bytes:
        """Encode the header as it is stored on disk."""
        if len(self.cprmask) != 4:
            raise ValueError("cprmask must hold exactly four masks")
        return self._LAYOUT.pack(
            self.magic, self.vstamp, self.tsize, self.dsize, self.bsize,
            self.entry, self.text_start, self.data_start, self.bss_start,
            self.gprmask, *self.cprmask, self.gp_value,
        )


@dataclass(frozen=True)
class SectionHeader:
    """One COFF section header."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<8s6IHHI")
    SIZE: ClassVar[int] = _LAYOUT.size

    name: str
    paddr: int = 0
    vaddr: int = 0
    size: int = 0
    scnptr: int = 0
    relptr: int = 0
    lnnoptr: int = 0
    nreloc: int = 0
    nlnno: int = 0
    flags: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> SectionHeader:
        """Decode the header from the start of ``data``."""
        raw_name, *rest = _unpack(cls._LAYOUT, data)
        name = raw_name.split(b"\0", 1)[0].decode("latin-1")
        return cls(name, *rest)

    def pack(self) -> bytes:
        """Encode the header as it is stored on disk."""
        raw_name = self.name.encode("latin-1")
        if len(raw_name) > 8:
            raise ValueError(f"section name too long: {self.name!r}")
        return self._LAYOUT.pack(
            raw_name, self.paddr, self.vaddr, self.size, self.scnptr,
            self.relptr, self.lnnoptr, self.nreloc, self.nlnno, self.flags,
        )


@dataclass(frozen=True)
class CoffFile:
    """A parsed COFF file: its headers and the raw bytes they refer to."""

    header: FileHeader
    aout: AoutHeader
    sections: tuple[SectionHeader, ...]
    data: bytes = field(repr=False)

    def section_data(self, section: SectionHeader) -> bytes:
        """Return the raw contents of ``section`` as stored in the file."""
        end = section.scnptr + section.size
        if end > len(self.data):
            raise CoffFormatError("File is too short")
        return self.data[section.scnptr:end]

    def find_section(self, name: str) -> SectionHeader | None:
        """Return the first section called ``name``, or None."""
        return next((s for s in self.sections if s.name == name), None)


def parse_coff(data: bytes) -> CoffFile:
    """Parse the file, optional and section headers of a MIPSEL COFF file."""
    data = bytes(data)
    header = FileHeader.from_bytes(data)
    if header.magic != MIPSELMAGIC:
        raise CoffFormatError("File is not a MIPSEL COFF file")
    aout = AoutHeader.from_bytes(data[FileHeader.SIZE:])
    start = FileHeader.SIZE + AoutHeader.SIZE
    end = start + header.nscns * SectionHeader.SIZE
    if len(data) < end:
        raise CoffFormatError("File is too short")
    sections = tuple(
        SectionHeader.from_bytes(data[offset:])
        for offset in range(start, end, SectionHeader.SIZE)
    )
    return CoffFile(header, aout, sections, data)


@dataclass(frozen=True)
class Segment:
    """Where a NOFF segment lives in memory and in the file."""

    virtual_addr: int = 0
    in_file_addr: int = 0
    size: int = 0


@dataclass(frozen=True)
class NoffHeader:
    """The header of a NOFF executable."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<10I")
    SIZE: ClassVar[int] = _LAYOUT.size

    magic: int = NOFFMAGIC
    code: Segment = field(default_factory=Segment)
    init_data: Segment = field(default_factory=Segment)
    uninit_data: Segment = field(default_factory=Segment)

    def pack(self) -> bytes:
        """Encode the header as it is stored on disk."""
        values = [self.magic]
        for segment in (self.code, self.init_data, self.uninit_data):
            values += [segment.virtual_addr, segment.in_file_addr, segment.size]
        return self._LAYOUT.pack(*values)

    @classmethod
    def from_bytes(cls, data: bytes) -> NoffHeader:
        """Decode the header from the start of ``data``."""
        magic, *rest = _unpack(cls._LAYOUT, data)
        code, init_data, uninit_data = (
            Segment(*rest[i:i + 3]) for i in (0, 3, 6)
        )
        return cls(magic, code, init_data, uninit_data)