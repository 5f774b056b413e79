import io

import pytest

from nachos.coff import AoutHeader, CoffFormatError, FileHeader, SectionHeader
from nachos.interp import load_program, main
from nachos.memory import Memory

BASE = 0x10000000

EXIT_PROGRAM = (
    (0x24020001).to_bytes(4, "little")   # addiu r2, r0, 1
    + (0x0000000C).to_bytes(4, "little")  # syscall
)


def build(code, vaddr=BASE):
    start = FileHeader.SIZE + AoutHeader.SIZE + SectionHeader.SIZE
    section = SectionHeader(".text", paddr=vaddr, vaddr=vaddr,
                            size=len(code), scnptr=start)
    return (FileHeader(nscns=1).pack() + AoutHeader().pack()
            + section.pack() + code)


def test_load_program_copies_text():
    mem = Memory(0x1000, BASE)
    out = io.StringIO()
    coff = load_program(mem, build(EXIT_PROGRAM), out)
    assert mem.read_bytes(BASE, 8) == EXIT_PROGRAM
    assert coff.find_section(".text").size == 8
    assert "rdata section header missing" in out.getvalue()
    assert "text section header missing" not in out.getvalue()


def test_load_program_too_large():
    mem = Memory(0x10, BASE)
    with pytest.raises(CoffFormatError):
        load_program(mem, build(bytes(0x20)), io.StringIO())


def test_main_runs_exit_program(tmp_path, capsys):
    path = tmp_path / "prog"
    path.write_bytes(build(EXIT_PROGRAM))
    assert main([str(path)]) == 0
    assert "bss section header missing" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nothing")]) == 0
    assert "Could not open" in capsys.readouterr().err


def test_main_unimplemented(tmp_path, capsys):
    path = tmp_path / "prog"
    path.write_bytes(build((0o20 << 26).to_bytes(4, "little")))
    assert main([str(path)]) == 2
    assert "no coprocessors" in capsys.readouterr().out