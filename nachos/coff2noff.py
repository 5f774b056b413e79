"""Convert a MIPSEL COFF executable into a NOFF executable."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from nachos.coff import (
    OMAGIC,
    CoffFile,
    CoffFormatError,
    NoffHeader,
    Segment,
    SectionHeader,
    parse_coff,
)

PROG = "coff2noff"


def _describe(section: SectionHeader) -> str:
    return (
        f'\t"{section.name}", filepos 0x{section.scnptr:x}, '
        f"mempos 0x{section.paddr:x}, size 0x{section.size:x}"
    )


def _build(coff: CoffFile, report: Callable[[str], object]) -> bytes:
    if coff.aout.magic != OMAGIC:
        raise CoffFormatError("File is not a OMAGIC file")
    count = len(coff.sections)
    report(f"numsections {count} ")

    code = Segment()
    init_data = Segment()
    uninit_data = Segment()
    body = bytearray()
    position = NoffHeader.SIZE

    report(f"Loading {count} sections:")
    for section in coff.sections:
        report(_describe(section))
        if section.size == 0:
            continue
        if section.name == ".text":
            code = Segment(section.paddr, position, section.size)
            body += coff.section_data(section)
            position += section.size
        elif section.name in (".data", ".rdata"):
            if init_data.size != 0:
                raise CoffFormatError("Can't handle both data and rdata")
            init_data = Segment(section.paddr, position, section.size)
            body += coff.section_data(section)
            position += section.size
        elif section.name in (".bss", ".sbss"):
            if uninit_data.size != 0:
                if section.paddr == uninit_data.virtual_addr + uninit_data.size:
                    raise CoffFormatError("Can't handle both bss and sbss")
                uninit_data = replace(
                    uninit_data, size=uninit_data.size + section.size
                )
            else:
                uninit_data = Segment(section.paddr, 0, section.size)
        else:
            raise CoffFormatError(f"Unknown segment type: {section.name}")

    header = NoffHeader(code=code, init_data=init_data, uninit_data=uninit_data)
    return header.pack() + bytes(body)


def convert(coff_data: bytes) -> bytes:
    """Return the NOFF image of the COFF executable ``coff_data``."""
    return _build(parse_coff(coff_data), lambda _line: None)


def main(argv: list[str] | None = None) -> int:
    """Convert the COFF file named first into the NOFF file named second."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print(f"Usage: {PROG} <coffFileName> <noffFileName>", file=sys.stderr)
        return 1
    source, target = Path(args[0]), Path(args[1])
    try:
        data = source.read_bytes()
    except OSError as exc:
        print(f"{source}: {exc.strerror}", file=sys.stderr)
        return 1
    try:
        image = _build(parse_coff(data), print)
    except CoffFormatError as exc:
        print(exc, file=sys.stderr)
        target.unlink(missing_ok=True)
        return 1
    try:
        target.write_bytes(image)
    except OSError as exc:
        print(f"{target}: {exc.strerror}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())