"""Disassemble the text section of a MIPSEL COFF executable."""

from __future__ import annotations

import sys
from pathlib import Path

from nachos.coff import MIPSELMAGIC, CoffFormatError, FileHeader, parse_coff
from nachos.disasm import format_instruction

PROG = "disasm"

MEMSIZE = 1 << 24
"""Bytes of simulated memory the program is loaded into."""

MEMOFFSET = 0x10000000
"""Address of the first byte of simulated memory."""

_LOAD_ORDER = (".text", ".rdata", ".data", ".sdata", ".sbss", ".bss")


def disassemble(coff_data: bytes) -> list[str]:
    """Load the sections of ``coff_data`` and return the disassembly listing.

    The listing starts with a notice for every missing standard section and
    continues with one line per word of text, starting at ``MEMOFFSET``.
    """
    coff = parse_coff(coff_data)
    lines: list[str] = []
    image = bytearray()

    for name in _LOAD_ORDER:
        section = coff.find_section(name)
        if section is None:
            lines.append(f"{name[1:]} section header missing")
            continue
        if section.scnptr == 0:
            continue
        start = section.vaddr - MEMOFFSET
        end = start + section.size
        if end > MEMSIZE:
            raise CoffFormatError("MEMSIZE too small. Fix and recompile.")
        if start < 0:
            raise CoffFormatError(
                f"section {section.name} lies below the start of memory"
            )
        if len(image) < end:
            image.extend(bytes(end - len(image)))
        image[start:end] = coff.section_data(section)

    text = coff.find_section(".text")
    text_size = text.size if text is not None else 0
    for offset in range(0, text_size, 4):
        word = int.from_bytes(image[offset:offset + 4].ljust(4, b"\0"), "little")
        lines.append(format_instruction(word, MEMOFFSET + offset))
    return lines


def main(argv: list[str] | None = None) -> int:
    """Print the disassembly of the named object file (default ``a.out``)."""
    args = sys.argv[1:] if argv is None else list(argv)
    while args and args[0].startswith("-"):
        args.pop(0)
    filename = args[0] if args else "a.out"

    try:
        data = Path(filename).read_bytes()
    except OSError:
        print(f"{PROG}: Could not open '{filename}'", file=sys.stderr)
        return 0
    try:
        header = FileHeader.from_bytes(data)
    except CoffFormatError:
        print(f"{PROG}: Load read error on {filename}", file=sys.stderr)
        return 0
    if header.magic != MIPSELMAGIC:
        print("big-endian object file (little-endian interp)", file=sys.stderr)
        return 0

    try:
        lines = disassemble(data)
    except CoffFormatError as exc:
        print(exc)
        return 1
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())