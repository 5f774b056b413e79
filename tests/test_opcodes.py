import pytest

from nachos.opcodes import (
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


def r_type(rs_, rt_, rd_, sh, funct):
    return (rs_ << 21) | (rt_ << 16) | (rd_ << 11) | (sh << 6) | funct


def test_register_fields_round_trip():
    word = r_type(7, 19, 31, 12, Special.ADDU)
    assert rs(word) == 7
    assert rt(word) == 19
    assert rd(word) == 31
    assert shamt(word) == 12
    assert word & 0x3F == Special.ADDU


@pytest.mark.parametrize("value", [0, 1, 0x1234, 0x7FFF])
def test_immed_positive_is_unchanged(value):
    assert immed(value) == value
    assert immed((Op.ADDIU << 26) | value) == value


@pytest.mark.parametrize("value", [-1, -8, -0x8000, -300])
def test_immed_sign_extends(value):
    assert immed(value & 0xFFFF) == value
    assert off16(value & 0xFFFF) == value * 4


def test_off26_and_top4():
    assert off26((Op.JAL << 26) | 0x3FFFFFF) == 0x3FFFFFF << 2
    assert top4(0x1FFFFFFF) == 0x10000000
    assert top4(0x0FFFFFFF) == 0


def test_opcode_constants_survive_field_extraction():
    assert immed(Op.LW) == 0o43
    assert immed(Special.SYSCALL) == 0o14
    assert rt(Bcond.BGEZAL << 16) == 0o21
    assert rd(Special.JR << 11) == 0o10