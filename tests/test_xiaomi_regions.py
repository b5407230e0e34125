import itertools

import pytest

from zigwire.exceptions import ParsingError, ValidationError
from zigwire.quirks.xiaomi import (
    DetectionRegion,
    RegionAction,
    RegionCodec,
    RegionEvent,
)
from zigwire.quirks.xiaomi.regions import AQARA_FP1_ZERO_MODIFY, RegionCommand


@pytest.fixture
def codec():
    return RegionCodec()


def test_full_grid(codec):
    assert RegionCodec.encode_rows(1, 7, 1, 4) == (0x0F,) * 7
    assert codec.encode(1, 1, 7, 1, 4) == bytes.fromhex("070101FFFFFF0FFF")


def test_single_cell(codec):
    assert RegionCodec.encode_rows(3, 3, 2, 2) == (0, 0, 0x02, 0, 0, 0, 0)
    assert codec.encode(4, 3, 3, 2, 2) == bytes.fromhex("07010400020000FF")


@pytest.mark.parametrize(
    ("left", "right", "value"),
    [
        (0, 0, 0b0000),
        (1, 1, 0b0001),
        (1, 2, 0b0011),
        (2, 4, 0b1110),
        (4, 4, 0b1000),
        (0, 2, 0b0011),
    ],
)
def test_row_value(left, right, value):
    assert RegionCodec.row_value(left, right) == value


def test_empty_box_clears_region(codec):
    assert codec.encode(5, 1, 7, 0, 0) == bytes.fromhex("0703050000000000")


def test_clear_payload_by_profile():
    assert RegionCodec().clear_payload(2) == bytes.fromhex("0703020000000000")
    assert RegionCodec(AQARA_FP1_ZERO_MODIFY).clear_payload(2) == bytes.fromhex(
        "0702020000000000"
    )
    assert RegionCodec("aqara.fp1.zero_modify").profile is AQARA_FP1_ZERO_MODIFY


def test_unknown_profile():
    with pytest.raises(ValueError):
        RegionCodec("nope")


@pytest.mark.parametrize(
    ("region_id", "top", "bottom", "left", "right"),
    [
        (0, 1, 7, 1, 4),
        (11, 1, 7, 1, 4),
        (1, 0, 7, 1, 4),
        (1, 5, 4, 1, 4),
        (1, 1, 8, 1, 4),
        (1, 1, 7, 3, 2),
        (1, 1, 7, 1, 5),
        (1, 1, 7, -1, 4),
    ],
)
def test_encode_invalid(codec, region_id, top, bottom, left, right):
    with pytest.raises(ValidationError):
        codec.encode(region_id, top, bottom, left, right)


def test_validation_error_is_value_error(codec):
    with pytest.raises(ValueError):
        codec.encode(1, 0, 7, 1, 4)


def test_detection_region_validation():
    with pytest.raises(ValidationError):
        DetectionRegion(1, (0,) * 6)

    with pytest.raises(ValidationError):
        DetectionRegion(1, (16, 0, 0, 0, 0, 0, 0))

    with pytest.raises(ValidationError):
        DetectionRegion.cleared(0)


def test_detection_region_from_grid(codec):
    region = DetectionRegion.from_grid(7, [1, 2, 4, 8, 0, 0, 15])

    assert not region.is_cleared
    assert repr(region) == "DetectionRegion(region_id=7, rows=[1 2 4 8 0 0 F])"
    assert codec.encode_region(region) == bytes.fromhex("0701072184000FFF")
    assert DetectionRegion.cleared(7).is_cleared


def test_decode_payload(codec):
    region = DetectionRegion.from_box(2, 2, 5, 1, 3)
    decoded = codec.decode_payload(codec.encode_region(region))

    assert decoded == region
    assert codec.decode_payload("0703020000000000") == DetectionRegion.cleared(2)
    assert codec.decode_payload("0702020000000000") == DetectionRegion.cleared(2)


VALID_BOXES = [
    (top, bottom, left, right)
    for top, bottom, left, right in itertools.product(
        range(1, 8), range(1, 8), range(0, 5), range(0, 5)
    )
    if top <= bottom and left <= right
]


@pytest.mark.parametrize(("top", "bottom", "left", "right"), VALID_BOXES)
def test_encode_decode_every_box(codec, top, bottom, left, right):
    rows = RegionCodec.encode_rows(top, bottom, left, right)
    decoded = codec.decode_payload(codec.encode(1, top, bottom, left, right))

    assert decoded == DetectionRegion(1, rows)


@pytest.mark.parametrize(
    "payload",
    [
        "0701",
        "080101FFFFFF0FFF",
        "070901FFFFFF0FFF",
        "070100FFFFFF0FFF",
        "07030B0000000000",
        "zz",
    ],
)
def test_decode_payload_invalid(codec, payload):
    with pytest.raises(ParsingError):
        codec.decode_payload(payload)


def test_masks():
    rows = (1, 2, 3, 4, 5, 6, 7)

    assert RegionCodec.encode_mask(rows) == 0x07654321
    assert RegionCodec.mask_hex(rows) == "07654321"
    assert RegionCodec.mask_hex((0,) * 7) == "00000000"
    assert RegionCodec.decode_mask(0x07654321) == rows
    assert RegionCodec.decode_mask("0000000F") == (15, 0, 0, 0, 0, 0, 0)

    with pytest.raises(ValidationError):
        RegionCodec.encode_mask((1, 2, 3))


def test_decode_event():
    assert RegionCodec.decode_event("0304") == RegionEvent(
        region_id=3, action=RegionAction.occupied, raw_action=0x04
    )
    assert RegionCodec.decode_event(b"\x0a\x01").action is RegionAction.enter
    assert RegionCodec.decode_event("0102").action is RegionAction.leave
    assert RegionCodec.decode_event("0108").action is RegionAction.unoccupied


def test_decode_event_unknown_action(caplog):
    event = RegionCodec.decode_event("0310")

    assert event.action is None
    assert event.raw_action == 0x10
    assert "Unknown action 0x10 for region 3" in caplog.text


def test_decode_event_too_short():
    with pytest.raises(ParsingError):
        RegionCodec.decode_event("03")


def test_region_command_values():
    assert RegionCommand.set == 0x01
    assert RegionCommand.modify == 0x02
    assert RegionCommand.delete == 0x03
