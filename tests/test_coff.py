import pytest

from nachos.coff import (
    MIPSELMAGIC,
    NOFFMAGIC,
    OMAGIC,
    AoutHeader,
    CoffFormatError,
    FileHeader,
    NoffHeader,
    Segment,
    SectionHeader,
    parse_coff,
)


def build_coff(specs, aout_magic=OMAGIC, file_magic=MIPSELMAGIC):
    header_len = FileHeader.SIZE + AoutHeader.SIZE + SectionHeader.SIZE * len(specs)
    headers = []
    body = bytearray()
    for name, addr, content in specs:
        if isinstance(content, int):
            headers.append(SectionHeader(name=name, paddr=addr, vaddr=addr, size=content))
        else:
            headers.append(
                SectionHeader(
                    name=name, paddr=addr, vaddr=addr, size=len(content),
                    scnptr=header_len + len(body),
                )
            )
            body += content
    return (
        FileHeader(magic=file_magic, nscns=len(specs)).pack()
        + AoutHeader(magic=aout_magic).pack()
        + b"".join(h.pack() for h in headers)
        + bytes(body)
    )


def test_file_header_round_trip():
    header = FileHeader(magic=MIPSELMAGIC, nscns=3, timdat=7, symptr=100,
                        nsyms=2, opthdr=AoutHeader.SIZE, flags=9)
    assert FileHeader.from_bytes(header.pack()) == header


def test_file_header_is_little_endian():
    assert FileHeader(magic=MIPSELMAGIC).pack()[:2] == b"\x62\x01"


def test_aout_header_round_trip():
    header = AoutHeader(magic=OMAGIC, tsize=16, entry=0x1000,
                        cprmask=(1, 2, 3, 4), gp_value=5)
    assert AoutHeader.from_bytes(header.pack()) == header


def test_aout_header_requires_four_masks():
    with pytest.raises(ValueError):
        AoutHeader(cprmask=(1, 2)).pack()


def test_section_header_round_trip():
    section = SectionHeader(".text", paddr=4, vaddr=4, size=12, scnptr=200,
                            nreloc=1, flags=0x20)
    decoded = SectionHeader.from_bytes(section.pack())
    assert decoded == section
    assert decoded.name == ".text"


def test_section_name_too_long():
    with pytest.raises(ValueError):
        SectionHeader("far_too_long").pack()


def test_short_header_raises():
    with pytest.raises(CoffFormatError, match="too short"):
        FileHeader.from_bytes(b"\x62\x01")


def test_parse_coff_sections():
    text = bytes(range(8))
    data = b"abcd"
    coff = parse_coff(build_coff([(".text", 0, text), (".data", 8, data), (".bss", 12, 16)]))
    assert [s.name for s in coff.sections] == [".text", ".data", ".bss"]
    assert coff.section_data(coff.sections[0]) == text
    assert coff.section_data(coff.find_section(".data")) == data
    assert coff.aout.magic == OMAGIC


def test_find_section_missing():
    coff = parse_coff(build_coff([(".text", 0, b"\0" * 4)]))
    assert coff.find_section(".rdata") is None


def test_parse_coff_bad_magic():
    with pytest.raises(CoffFormatError, match="MIPSEL"):
        parse_coff(build_coff([], file_magic=0x0160))


def test_parse_coff_truncated_sections():
    image = build_coff([(".text", 0, b"\0" * 4)])
    cut = FileHeader.SIZE + AoutHeader.SIZE + 3
    with pytest.raises(CoffFormatError):
        parse_coff(image[:cut])


def test_section_data_out_of_range():
    coff = parse_coff(build_coff([(".text", 0, b"\0" * 8)]))
    broken = SectionHeader(".text", size=8, scnptr=len(coff.data) - 4)
    with pytest.raises(CoffFormatError):
        coff.section_data(broken)


def test_noff_header_round_trip():
    header = NoffHeader(
        code=Segment(0, NoffHeader.SIZE, 64),
        init_data=Segment(64, NoffHeader.SIZE + 64, 8),
        uninit_data=Segment(72, 0, 32),
    )
    assert NoffHeader.from_bytes(header.pack()) == header


def test_noff_header_defaults():
    header = NoffHeader()
    assert header.magic == NOFFMAGIC
    assert len(header.pack()) == 40
    assert header.code == Segment()