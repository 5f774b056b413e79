"""Convert a MIPSEL COFF executable into a flat memory image."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from nachos.coff import OMAGIC, CoffFile, CoffFormatError, SectionHeader, parse_coff

PROG = "coff2flat"

STACK_SIZE = 1024
"""Bytes reserved for the stack after the highest section, by default."""

_UNINITIALIZED = frozenset({".bss", ".sbss"})


def _describe(section: SectionHeader) -> str:
    return (
        f'\t"{section.name}", filepos 0x{section.scnptr:x}, '
        f"mempos 0x{section.paddr:x}, size 0x{section.size:x}"
    )


def _flatten(
    coff: CoffFile, stack_size: int, report: Callable[[str], object]
) -> bytes:
    if coff.aout.magic != OMAGIC:
        raise CoffFormatError("File is not a OMAGIC file")

    report(f"Loading {len(coff.sections)} sections:")
    top = 0
    image = bytearray()
    for section in coff.sections:
        report(_describe(section))
        top = max(top, section.paddr + section.size)
        if section.name not in _UNINITIALIZED:
            image += coff.section_data(section)

    report(f"Adding stack of size: {stack_size}")
    end = top + stack_size - 4
    if end < 0:
        raise ValueError("stack size leaves no room for the end marker")
    if len(image) < end + 4:
        image.extend(bytes(end + 4 - len(image)))
    # A blank word marks where the image ends.
    image[end:end + 4] = bytes(4)
    return bytes(image)


def flatten(coff_data: bytes, stack_size: int = STACK_SIZE) -> bytes:
    """Return the flat image of ``coff_data`` with ``stack_size`` bytes of stack."""
    return _flatten(parse_coff(coff_data), stack_size, lambda _line: None)


def main(argv: list[str] | None = None) -> int:
    """Convert the COFF file named first into the flat file named second."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print(f"Usage: {PROG} <coffFileName> <flatFileName>", file=sys.stderr)
        return 1
    source, target = Path(args[0]), Path(args[1])
    try:
        data = source.read_bytes()
    except OSError as exc:
        print(f"{source}: {exc.strerror}", file=sys.stderr)
        return 1
    try:
        image = _flatten(parse_coff(data), STACK_SIZE, print)
    except (CoffFormatError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        target.write_bytes(image)
    except OSError as exc:
        print(f"{target}: {exc.strerror}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())