import pytest

import zigwire.types as t


def test_abstract_ints():
    with pytest.raises(TypeError):
        t.uint_t(0)

    with pytest.raises(TypeError):
        t.FixedIntType(0)


def test_int_out_of_bounds():
    with pytest.raises(ValueError):
        t.uint8_t(-1)

    with pytest.raises(ValueError):
        t.uint8_t(0x100)

    assert t.uint16_t(0xFFFF) == 0xFFFF


def test_int_too_short():
    with pytest.raises(ValueError):
        t.uint8_t.deserialize(b"")

    with pytest.raises(ValueError):
        t.uint16_t.deserialize(b"\x00")


def test_ints_little_endian():
    assert t.uint16_t(0x0102).serialize() == b"\x02\x01"
    assert t.uint16_t.deserialize(b"\x02\x01rest") == (0x0102, b"rest")
    assert t.uint8_t.size() == 1
    assert t.uint16_t.size() == 2


def test_bigendian_ints():
    assert t.uint16_t_be(0x0102).serialize() == b"\x01\x02"
    assert t.uint16_t_be.deserialize(b"\xfc\xc0") == (0xFCC0, b"")


def test_hex_repr():
    assert repr(t.NWK(0x1234)) == "0x1234"
    assert str(t.NWK(0x00AB)) == "0x00AB"


def test_enum_undefined_member():
    class TestEnum(t.enum8):
        Member = 0x00

    assert TestEnum(0x00) is TestEnum.Member
    assert TestEnum(0x42).name == "undefined_0x42"
    assert TestEnum(0x42) == 0x42
    assert f"{TestEnum.Member:02X}" == "00"


def test_bitmap_keeps_unknown_bits():
    class TestBitmap(t.bitmap8):
        A = 0b0001
        B = 0b0010

    value = TestBitmap(0b1011)
    assert TestBitmap.A in value
    assert TestBitmap.B in value
    assert int(value) == 0b1011


def test_lvbytes():
    assert t.LVBytes(b"abc").serialize() == b"\x03abc"
    assert t.LVBytes.deserialize(b"\x02abc") == (b"ab", b"c")
    assert t.LongOctetString(b"ab").serialize() == b"\x02\x00ab"


def test_lvbytes_too_short():
    with pytest.raises(ValueError):
        t.LVBytes.deserialize(b"")

    with pytest.raises(ValueError):
        t.LVBytes.deserialize(b"\x04abc")


def test_eui64():
    ieee = t.EUI64.convert("00:0d:6f:00:0a:bc:de:f0")

    assert repr(ieee) == "00:0d:6f:00:0a:bc:de:f0"
    assert ieee.serialize() == bytes.fromhex("f0debc0a006f0d00")
    assert t.EUI64.deserialize(ieee.serialize() + b"\x01") == (ieee, b"\x01")

    with pytest.raises(ValueError):
        t.EUI64(b"\x00" * 7)
