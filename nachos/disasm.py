"""Render MIPS instruction words as assembly text."""

from __future__ import annotations

from nachos.opcodes import (
    NOP,
    NORMAL_OPS,
    SPECIAL_OPS,
    Bcond,
    Op,
    Special,
    immed,
    off16,
    off26,
    rd,
    rs,
    rt,
    shamt,
    top4,
)

_MASK = 0xFFFFFFFF

REGISTER_NAMES: tuple[str, ...] = (
    "0", "r1", "r2", "r3", "r4", "r5", "r6", "r7", "r8", "r9",
    "r10", "r11", "r12", "r13", "r14", "r15", "r16", "r17", "r18", "r19",
    "r20", "r21", "r22", "r23", "r24", "r25", "r26", "r27", "gp", "sp",
    "r30", "r31",
)

_R = REGISTER_NAMES

_SHIFT_IMM = frozenset({Special.SLL, Special.SRL, Special.SRA})
_SHIFT_VAR = frozenset({Special.SLLV, Special.SRLV, Special.SRAV})
_RS_ONLY = frozenset({Special.JR, Special.JALR, Special.MFLO, Special.MTLO})
_RD_ONLY = frozenset({Special.MFHI, Special.MTHI})
_MULDIV = frozenset({Special.MULT, Special.MULTU, Special.DIV, Special.DIVU})
_THREE_REG = frozenset({
    Special.ADD, Special.ADDU, Special.SUB, Special.SUBU, Special.AND,
    Special.OR, Special.XOR, Special.NOR, Special.SLT, Special.SLTU,
})

_JUMPS = frozenset({Op.J, Op.JAL})
_BRANCHES = frozenset({Op.BEQ, Op.BNE})
_IMMEDIATE = frozenset({
    Op.ADDI, Op.ADDIU, Op.SLTI, Op.SLTIU, Op.ANDI, Op.ORI, Op.XORI,
})
_MEMORY = frozenset({
    Op.LB, Op.LH, Op.LWL, Op.LW, Op.LBU, Op.LHU, Op.LWR,
    Op.SB, Op.SH, Op.SWL, Op.SW, Op.SWR,
    Op.LWC0, Op.LWC1, Op.LWC2, Op.LWC3,
    Op.SWC0, Op.SWC1, Op.SWC2, Op.SWC3,
})

_BCOND_NAMES = {cond.value: cond.name.lower() for cond in Bcond}


def _hex(value: int) -> str:
    return f"0x{value & _MASK:x}"


def _special_operands(funct: int, word: int) -> str:
    if funct in _SHIFT_IMM:
        return f"{_R[rd(word)]},{_R[rt(word)]},{_hex(shamt(word))}"
    if funct in _SHIFT_VAR:
        return f"{_R[rd(word)]},{_R[rt(word)]},{_R[rs(word)]}"
    if funct in _RS_ONLY:
        return _R[rs(word)]
    if funct in _RD_ONLY:
        return _R[rd(word)]
    if funct in _MULDIV:
        return f"{_R[rs(word)]},{_R[rt(word)]}"
    if funct in _THREE_REG:
        return f"{_R[rd(word)]},{_R[rs(word)]},{_R[rt(word)]}"
    return ""


def _normal_operands(opcode: int, word: int, pc: int) -> str:
    if opcode in _JUMPS:
        return f"{(top4(pc) | off26(word)) & _MASK:08x}"
    if opcode in _BRANCHES:
        target = (off16(word) + pc + 4) & _MASK
        return f"{_R[rt(word)]},{_R[rs(word)]},{target:08x}"
    if opcode in _IMMEDIATE:
        return f"{_R[rt(word)]},{_R[rs(word)]},{_hex(immed(word))}"
    if opcode == Op.LUI:
        return f"{_R[rt(word)]},{_hex(immed(word))}"
    if opcode in _MEMORY:
        return f"{_R[rt(word)]},{_hex(immed(word))}({_R[rs(word)]})"
    return ""


def _body(word: int, pc: int) -> str:
    if word == NOP:
        return "nop"
    opcode = word >> 26
    if opcode == Op.SPECIAL:
        funct = word & 0x3F
        return f"{SPECIAL_OPS[funct]}\t{_special_operands(funct, word)}"
    if opcode == Op.BCOND:
        name = _BCOND_NAMES.get(rt(word), "BCOND")
        target = (off16(word) + pc + 4) & _MASK
        return f"{name}\t{_R[rs(word)]},{target:08x}"
    return f"{NORMAL_OPS[opcode]}\t{_normal_operands(opcode, word, pc)}"


def format_instruction(instruction: int, pc: int, show_address: bool = True) -> str:
    """Return the assembly text of ``instruction`` located at ``pc``.

    With ``show_address`` the text is prefixed by the address and the raw
    word in hexadecimal. No trailing newline is added.
    """
    word = instruction & _MASK
    prefix = f"{pc & _MASK:08x}: {word:08x}  " if show_address else ""
    return f"{prefix}\t{_body(word, pc)}"