"""Load a MIPSEL COFF executable into memory and interpret it."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from nachos.coff import CoffFile, CoffFormatError, parse_coff
from nachos.machine import Machine, UnimplementedInstruction
from nachos.memory import Memory
from nachos.syscalls import SyscallHandler

PROG = "interp"

_LOAD_ORDER = (".text", ".rdata", ".data", ".sdata", ".sbss", ".bss")


def load_program(
    memory: Memory, coff_data: bytes, out: TextIO | None = None
) -> CoffFile:
    """Copy the standard sections of ``coff_data`` into ``memory``.

    A notice is written to ``out`` for every standard section that is missing.
    """
    out = out if out is not None else sys.stdout
    coff = parse_coff(coff_data)
    for name in _LOAD_ORDER:
        section = coff.find_section(name)
        if section is None:
            out.write(f"{name[1:]} section header missing\n")
            continue
        if section.scnptr == 0:
            continue
        if section.vaddr + section.size - memory.offset >= memory.size:
            raise CoffFormatError("MEMSIZE too small. Fix and recompile.")
        memory.load(section.vaddr, coff.section_data(section))
    return coff


def main(argv: list[str] | None = None) -> int:
    """Run the named program (default ``a.out``) and return its exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    trace = trap_trace = reg_trace = False
    while args and args[0].startswith("-"):
        flags = args.pop(0)
        for flag in flags[1:]:
            if flag == "t":
                trace = True
            elif flag == "T":
                trap_trace = True
            elif flag == "r":
                reg_trace = True
            elif flag == "m":
                del args[:4]  # cache parameters, not simulated

    filename = args[0] if args else "a.out"
    try:
        data = Path(filename).read_bytes()
    except OSError:
        print(f"{PROG}: Could not open '{filename}'", file=sys.stderr)
        return 0

    memory = Memory()
    try:
        load_program(memory, data)
    except CoffFormatError as exc:
        print(f"{PROG}: Load read error on {filename}: {exc}", file=sys.stderr)
        return 0

    machine = Machine(memory, SyscallHandler(trace=trap_trace), trace=trace)
    machine.reg_trace = reg_trace
    program_args = args if args else ["a.out"]
    try:
        code = machine.run(memory.offset, program_args)
    except (UnimplementedInstruction, ZeroDivisionError) as exc:
        print(exc)
        return 2
    sys.stdout.flush()
    return code


if __name__ == "__main__":
    raise SystemExit(main())