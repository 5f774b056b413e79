import io

import pytest

from nachos.machine import Machine, ProgramExit, UnimplementedInstruction, ilog2
from nachos.memory import Memory

BASE = 0x10000000


def itype(op, rs, rt, imm):
    return (op << 26) | (rs << 21) | (rt << 16) | (imm & 0xFFFF)


def rtype(funct, rs=0, rt=0, rd=0, sh=0):
    return (rs << 21) | (rt << 16) | (rd << 11) | (sh << 6) | funct


def make(words, **kwargs):
    mem = Memory(0x1000, BASE)
    for n, word in enumerate(words):
        mem.store(BASE + 4 * n, word)
    return Machine(mem, **kwargs)


def run_steps(machine, n):
    for _ in range(n):
        machine.step()
    return machine.registers


def test_addiu_negative():
    regs = run_steps(make([itype(0o11, 0, 8, -3)]), 1)
    assert regs[8] == -3


def test_subu_wraps_and_slt():
    m = make([
        itype(0o11, 0, 8, 1),
        rtype(0o43, rs=0, rt=8, rd=9),   # r9 = 0 - 1
        rtype(0o52, rs=9, rt=0, rd=10),  # slt r10 = r9 < 0
        rtype(0o53, rs=9, rt=0, rd=11),  # sltu r11 = r9 < 0 unsigned
    ])
    regs = run_steps(m, 4)
    assert regs[9] == -1
    assert regs[10] == 1
    assert regs[11] == 0


def test_lui_ori_store_load():
    m = make([
        itype(0o17, 0, 8, 0x1000),       # lui r8, 0x1000
        itype(0o15, 8, 8, 0x800),        # ori r8, r8, 0x800
        itype(0o11, 0, 9, 42),
        itype(0o53, 8, 9, 0),            # sw r9, 0(r8)
        itype(0o43, 8, 10, 0),           # lw r10, 0(r8)
    ])
    regs = run_steps(m, 5)
    assert regs[8] == BASE + 0x800
    assert regs[10] == 42
    assert m.memory.fetch(BASE + 0x800) == 42


def test_branch_delay_slot():
    m = make([
        itype(0o04, 0, 0, 2),            # beq r0, r0, +2
        itype(0o11, 0, 8, 5),            # delay slot
        itype(0o11, 0, 9, 7),            # skipped
        itype(0o11, 0, 10, 9),           # target
    ])
    regs = run_steps(m, 3)
    assert (regs[8], regs[9], regs[10]) == (5, 0, 9)


def test_jal_links():
    m = make([(0o03 << 26) | ((BASE + 12) >> 2 & 0x3FFFFFF), 0])
    run_steps(m, 2)
    assert m.registers[31] == BASE + 8
    assert m.pc == BASE + 12


def test_mult_and_div():
    m = make([
        itype(0o11, 0, 8, -7),
        itype(0o11, 0, 9, 2),
        rtype(0o30, rs=8, rt=9),         # mult
        rtype(0o22, rd=10),              # mflo
        rtype(0o20, rd=11),              # mfhi
        rtype(0o32, rs=8, rt=9),         # div
        rtype(0o22, rd=12),
        rtype(0o20, rd=13),
    ])
    regs = run_steps(m, 8)
    assert regs[10] == -14
    assert regs[11] == -1
    assert regs[12] == -3
    assert regs[13] == -1


def test_register_zero_is_forced():
    m = make([itype(0o11, 0, 0, 5), 0])
    run_steps(m, 2)
    assert m.registers[0] == 0


def test_coprocessor_unimplemented():
    with pytest.raises(UnimplementedInstruction):
        run_steps(make([itype(0o20, 0, 0, 0)]), 1)


class ExitHandler:
    def handle(self, machine):
        raise ProgramExit(machine.registers[4])

    def breakpoint(self, machine):
        raise ProgramExit(99)


def test_run_until_syscall_exit():
    m = make([itype(0o11, 0, 4, 3), rtype(0o14)], syscall_handler=ExitHandler())
    assert m.run(BASE, ["prog", "x"]) == 3
    sp = m.registers[29]
    assert m.memory.fetch(sp) == 2
    first = m.memory.fetch(sp + 4)
    assert m.memory.read_cstring(first) == b"prog"
    assert m.memory.read_cstring(m.memory.fetch(sp + 8)) == b"x"


def test_syscall_without_handler():
    with pytest.raises(UnimplementedInstruction):
        run_steps(make([rtype(0o14)]), 1)


def test_trace_and_dump():
    out = io.StringIO()
    m = make([0], trace=True, out=out)
    m.reg_trace = True
    m.registers[8] = 0x1234
    m.step()
    text = out.getvalue()
    assert "nop" in text
    assert " 8: 00001234" in text
    assert m.dump_registers().count("\n") == 4


def test_ilog2():
    assert ilog2(0) == 0
    assert ilog2(1) == 1
    assert ilog2(-1) == 32