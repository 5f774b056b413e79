"""An interpreter for the user-mode MIPS instruction set."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from nachos.disasm import format_instruction
from nachos.memory import Memory
from nachos.opcodes import Bcond, Op, Special, immed, rd, rs, rt, shamt

_MASK = 0xFFFFFFFF


class UnimplementedInstruction(RuntimeError):
    """Raised when the machine meets an instruction it cannot execute."""


class ProgramExit(Exception):
    """Raised when the simulated program terminates."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


def _s32(value: int) -> int:
    value &= _MASK
    return value - (1 << 32) if value & 0x80000000 else value


def _u32(value: int) -> int:
    return value & _MASK


def _trunc_div(a: int, b: int) -> tuple[int, int]:
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


class Machine:
    """The registers of a MIPS processor attached to a memory."""

    def __init__(
        self,
        memory: Memory,
        syscall_handler: Any = None,
        trace: bool = False,
        out: TextIO | None = None,
    ) -> None:
        self.memory = memory
        self.syscall_handler = syscall_handler
        self.trace = trace
        self.reg_trace = False
        self._out = out
        self.registers = [0] * 32
        self.hi = 0
        self.lo = 0
        self.pc = memory.offset
        self.npc = self.pc + 4
        self.instruction_count = 0

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def setup_args(self, argv: list[str]) -> None:
        """Set the stack pointer and lay out ``argc`` and ``argv`` above it."""
        sp = self.memory.offset + self.memory.size - 1024
        self.registers[29] = _s32(sp)
        self.memory.store(sp, len(argv))
        slot = sp + 4
        text = slot + 32
        for arg in argv:
            raw = arg.encode("latin-1")
            self.memory.load(text, raw + b"\0")
            self.memory.store(slot, text)
            slot += 4
            text += len(raw) + 1

    def step(self) -> None:
        """Execute one instruction, honouring the branch delay slot."""
        self.instruction_count += 1
        xpc = self.pc
        self.pc = self.npc
        self.npc = _u32(self.pc + 4)
        instr = self.memory.fetch(xpc) & _MASK
        self.registers[0] = 0
        if instr:
            self._execute(instr, xpc)
        if self.trace:
            self.out.write(format_instruction(instr, xpc) + "\n")
            if self.reg_trace:
                self.out.write(self.dump_registers())

    def run(self, start_pc: int, argv: list[str]) -> int:
        """Run from ``start_pc`` until the program exits; return its exit code."""
        self.pc = _u32(start_pc)
        self.npc = _u32(start_pc + 4)
        self.setup_args(argv)
        try:
            while True:
                self.step()
        except ProgramExit as done:
            return done.code

    def dump_registers(self) -> str:
        """Return the general registers as four lines of eight words."""
        lines = []
        for base in range(0, 32, 8):
            words = "".join(f" {_u32(r):08x}" for r in self.registers[base:base + 8])
            lines.append(f"{base:2d}:{words}\n")
        return "".join(lines)

    def _syscall(self, breakpoint: bool) -> None:
        if self.syscall_handler is None:
            raise UnimplementedInstruction("no system call handler")
        if breakpoint:
            self.syscall_handler.breakpoint(self)
        else:
            self.syscall_handler.handle(self)

    def _branch(self, taken: bool, instr: int, xpc: int) -> None:
        if taken:
            self.npc = _u32(xpc + 4 + (immed(instr) << 2))

    def _execute_special(self, instr: int, xpc: int) -> None:
        r = self.registers
        s, t, d = rs(instr), rt(instr), rd(instr)
        funct = instr & 0x3F
        if funct == Special.SLL:
            r[d] = _s32(r[t] << shamt(instr))
        elif funct == Special.SRL:
            r[d] = _s32(_u32(r[t]) >> shamt(instr))
        elif funct == Special.SRA:
            r[d] = r[t] >> shamt(instr)
        elif funct == Special.SLLV:
            r[d] = _s32(r[t] << (r[s] & 31))
        elif funct == Special.SRLV:
            r[d] = _s32(_u32(r[t]) >> (r[s] & 31))
        elif funct == Special.SRAV:
            r[d] = r[t] >> (r[s] & 31)
        elif funct == Special.JR:
            self.npc = _u32(r[s])
        elif funct == Special.JALR:
            self.npc = _u32(r[s])
            r[d] = _s32(xpc + 8)
        elif funct == Special.SYSCALL:
            self._syscall(False)
        elif funct == Special.BREAK:
            self._syscall(True)
        elif funct == Special.MFHI:
            r[d] = self.hi
        elif funct == Special.MTHI:
            self.hi = r[s]
        elif funct == Special.MFLO:
            r[d] = self.lo
        elif funct == Special.MTLO:
            self.lo = r[s]
        elif funct in (Special.MULT, Special.MULTU):
            if funct == Special.MULT:
                product = r[s] * r[t]
            else:
                product = _u32(r[s]) * _u32(r[t])
            self.lo = _s32(product)
            self.hi = _s32(product >> 32)
        elif funct == Special.DIV:
            q, rem = _trunc_div(r[s], r[t])
            self.lo, self.hi = _s32(q), _s32(rem)
        elif funct == Special.DIVU:
            q, rem = _trunc_div(_u32(r[s]), _u32(r[t]))
            self.lo, self.hi = _s32(q), _s32(rem)
        elif funct in (Special.ADD, Special.ADDU):
            r[d] = _s32(r[s] + r[t])
        elif funct in (Special.SUB, Special.SUBU):
            r[d] = _s32(r[s] - r[t])
        elif funct == Special.AND:
            r[d] = r[s] & r[t]
        elif funct == Special.OR:
            r[d] = r[s] | r[t]
        elif funct == Special.XOR:
            r[d] = r[s] ^ r[t]
        elif funct == Special.NOR:
            r[d] = _s32(~(r[s] | r[t]))
        elif funct == Special.SLT:
            r[d] = int(r[s] < r[t])
        elif funct == Special.SLTU:
            r[d] = int(_u32(r[s]) < _u32(r[t]))
        else:
            raise UnimplementedInstruction("Unimplemented Instruction")

    def _execute(self, instr: int, xpc: int) -> None:
        r = self.registers
        mem = self.memory
        s, t = rs(instr), rt(instr)
        imm = immed(instr)
        op = (instr >> 26) & 0x3F
        addr = _u32(r[s] + imm)

        if op == Op.SPECIAL:
            self._execute_special(instr, xpc)
        elif op == Op.BCOND:
            if t in (Bcond.BLTZAL, Bcond.BGEZAL):
                r[31] = _s32(xpc + 8)
            if t in (Bcond.BLTZ, Bcond.BLTZAL):
                self._branch(r[s] < 0, instr, xpc)
            elif t in (Bcond.BGEZ, Bcond.BGEZAL):
                self._branch(r[s] >= 0, instr, xpc)
            else:
                raise UnimplementedInstruction("Unimplemented Instruction")
        elif op in (Op.J, Op.JAL):
            if op == Op.JAL:
                r[31] = _s32(xpc + 8)
            self.npc = (xpc & 0xF0000000) | ((instr & 0x03FFFFFF) << 2)
        elif op == Op.BEQ:
            self._branch(r[s] == r[t], instr, xpc)
        elif op == Op.BNE:
            self._branch(r[s] != r[t], instr, xpc)
        elif op == Op.BLEZ:
            self._branch(r[s] <= 0, instr, xpc)
        elif op == Op.BGTZ:
            self._branch(r[s] > 0, instr, xpc)
        elif op in (Op.ADDI, Op.ADDIU):
            r[t] = _s32(r[s] + imm)
        elif op == Op.SLTI:
            r[t] = int(r[s] < imm)
        elif op == Op.SLTIU:
            r[t] = int(_u32(r[s]) < _u32(imm))
        elif op == Op.ANDI:
            r[t] = r[s] & imm
        elif op == Op.ORI:
            r[t] = _s32(r[s] | imm)
        elif op == Op.XORI:
            r[t] = _s32(r[s] ^ imm)
        elif op == Op.LUI:
            r[t] = _s32(instr << 16)
        elif op == Op.LB:
            r[t] = mem.cfetch(addr)
        elif op == Op.LH:
            r[t] = mem.sfetch(addr)
        elif op == Op.LWL:
            word = mem.fetch(addr & 0xFFFFFFFC)
            r[t] = _s32(r[t] | (word << (8 * (addr & 3))))
        elif op == Op.LW:
            r[t] = mem.fetch(addr)
        elif op == Op.LBU:
            r[t] = mem.ucfetch(addr)
        elif op == Op.LHU:
            r[t] = mem.usfetch(addr)
        elif op == Op.LWR:
            value = r[t] & (-1 << (8 * (addr & 3)))
            if addr & 3 == 0:
                value = 0
            word = mem.fetch(addr & 0xFFFFFFFC)
            r[t] = _s32(value | (word >> (8 * ((-addr) & 3))))
        elif op == Op.SB:
            mem.cstore(addr, r[t])
        elif op == Op.SH:
            mem.sstore(addr, r[t])
        elif op == Op.SW:
            mem.store(addr, r[t])
        elif op == Op.SWL:
            raise UnimplementedInstruction("sorry, no SWL yet.")
        elif op == Op.SWR:
            raise UnimplementedInstruction("sorry, no SWR yet.")
        elif op in (
            Op.LWC0, Op.LWC1, Op.LWC2, Op.LWC3, Op.SWC0, Op.SWC1, Op.SWC2,
            Op.SWC3, Op.COP0, Op.COP1, Op.COP2, Op.COP3,
        ):
            raise UnimplementedInstruction("Sorry, no coprocessors.")
        else:
            raise UnimplementedInstruction("Unimplemented Instruction")


def ilog2(i: int) -> int:
    """Return the number of bits needed to hold ``i`` as an unsigned word."""
    i &= _MASK
    if i == 0:
        return 0
    result = 1
    for mask, step in (
        (0xFFFF0000, 16), (0xFF00FF00, 8), (0xF0F0F0F0, 4),
        (0xCCCCCCCC, 2), (0xAAAAAAAA, 1),
    ):
        masked = i & mask
        if masked:
            i = masked
            result += step
    return result