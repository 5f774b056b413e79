import pytest

from nachos.memory import Memory, MemoryError_

BASE = 0x10000000


@pytest.fixture
def mem():
    return Memory(0x100, BASE)


def test_word_round_trip_signed(mem):
    mem.store(BASE + 8, -5)
    assert mem.fetch(BASE + 8) == -5


def test_little_endian_layout(mem):
    mem.store(BASE, 0x01020304)
    assert mem.read_bytes(BASE, 4) == b"\x04\x03\x02\x01"


def test_half_words(mem):
    mem.sstore(BASE + 2, 0xFFFF)
    assert mem.sfetch(BASE + 2) == -1
    assert mem.usfetch(BASE + 2) == 0xFFFF


def test_bytes(mem):
    mem.cstore(BASE + 1, 0x1FF)
    assert mem.cfetch(BASE + 1) == -1
    assert mem.ucfetch(BASE + 1) == 0xFF


def test_load_and_cstring(mem):
    mem.load(BASE + 16, b"hello\0world")
    assert mem.read_cstring(BASE + 16) == b"hello"
    assert mem.read_bytes(BASE + 22, 5) == b"world"


def test_out_of_range(mem):
    with pytest.raises(MemoryError_):
        mem.fetch(BASE + 0xFE)
    with pytest.raises(MemoryError_):
        mem.store(BASE - 4, 1)


def test_bad_size():
    with pytest.raises(ValueError):
        Memory(0, BASE)