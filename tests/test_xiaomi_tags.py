import pytest

from zigwire.exceptions import ParsingError
from zigwire.quirks.xiaomi import TagDecoderProfile, XiaomiTag, XiaomiTagDecoder
from zigwire.quirks.xiaomi.tags import FP1_TAGS, MOTION_SENSOR_TAGS


def test_decode_numeric_tags():
    decoder = XiaomiTagDecoder()

    assert decoder.decode("652001082004") == {0x65: 1, 0x08: 4}


def test_decode_bytes():
    decoder = XiaomiTagDecoder()

    assert decoder.decode(bytes.fromhex("0821A813")) == {0x08: 0x13A8}


def test_decode_little_endian_unsigned():
    decoder = XiaomiTagDecoder()

    # int8 values are still reconstructed unsigned
    assert decoder.decode("0A28FF" "0B23FFFFFFFF") == {0x0A: 0xFF, 0x0B: 0xFFFFFFFF}


def test_decode_string_tag():
    decoder = XiaomiTagDecoder()
    tags = list(decoder.iter_tags("0542" "03" "616263" "6520" "01"))

    assert tags == [XiaomiTag(0x05, 0x42, "abc"), XiaomiTag(0x65, 0x20, 1)]


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ("01440200616208200A", {0x01: "ab", 0x08: 10}),
        ("0243" "0100" "41" "652001", {0x02: "A", 0x65: 1}),
        ("0344" "0000" "652001", {0x03: "", 0x65: 1}),
    ],
)
def test_decode_long_string_tag(payload, expected):
    assert XiaomiTagDecoder().decode(payload) == expected


def test_decode_invalid_utf8_is_replaced():
    decoder = XiaomiTagDecoder()

    assert decoder.decode("0541" "02" "FF61") == {0x05: "�a"}


def test_decode_stops_on_short_tail():
    decoder = XiaomiTagDecoder()

    assert decoder.decode("65200101") == {0x65: 1}
    assert decoder.decode("") == {}
    assert decoder.decode("6520") == {}


def test_decode_truncated_value():
    decoder = XiaomiTagDecoder()

    with pytest.raises(ParsingError):
        decoder.decode("652301")

    with pytest.raises(ParsingError):
        decoder.decode("0542" "05" "6162")

    with pytest.raises(ParsingError):
        decoder.decode("0144" "0300" "6162")

    with pytest.raises(ParsingError):
        decoder.decode("014402")


def test_decode_unknown_type():
    decoder = XiaomiTagDecoder()

    with pytest.raises(ParsingError):
        decoder.decode("650501")

    # variable length types other than strings cannot be decoded
    with pytest.raises(ParsingError):
        decoder.decode("654C0100")


def test_decode_not_hex():
    with pytest.raises(ParsingError):
        XiaomiTagDecoder().decode("zz")


def test_uint40_width_by_profile():
    standard = XiaomiTagDecoder("standard")
    assert standard.decode("0124" "0102030405" "652001") == {
        0x01: 0x0504030201,
        0x65: 1,
    }

    alternate = XiaomiTagDecoder("lumi.alt_widths")
    assert alternate.decode("0124" "010203040506" "652001") == {
        0x01: 0x060504030201,
        0x65: 1,
    }


def test_custom_profile():
    profile = TagDecoderProfile(name="test", width_overrides={0x20: 2})
    decoder = XiaomiTagDecoder(profile)

    assert decoder.decode("65200100") == {0x65: 1}


def test_unknown_profile_name():
    with pytest.raises(KeyError):
        XiaomiTagDecoder("nope")


def test_later_duplicates_win():
    assert XiaomiTagDecoder().decode("652001" "652000") == {0x65: 0}


def test_name_tags():
    tags = XiaomiTagDecoder().decode("652001" "082004" "662003" "FF2001")

    assert XiaomiTagDecoder.name_tags(tags, FP1_TAGS) == {
        "presence": 1,
        "software_build": 4,
        "presence_action": 3,
    }
    assert XiaomiTagDecoder.name_tags(tags, MOTION_SENSOR_TAGS) == {
        "software_build": 4,
        "sensitivity": 3,
    }
