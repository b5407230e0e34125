"""Codec for the Aqara FP1 7x4 detection grid.

The grid has seven rows (top to bottom) of four columns (left to right).
Every row is a nibble where bit 0 is the leftmost column::

        X1 X2 X3 X4
    Y1 | 1| 2| 4| 8|
    Y2 | 1| 2| 4| 8|
    ...
    Y7 | 1| 2| 4| 8|

Detection regions are written to attribute 0x0150 as an octet string, the
interference, exit/entrance and edge masks are written as a UINT32 with one
nibble per row, row 1 being the least significant.
"""

from __future__ import annotations

import dataclasses
import logging
import typing

from zigwire.exceptions import ParsingError, ValidationError
import zigwire.types as t

LOGGER = logging.getLogger(__name__)

ROW_COUNT = 7
COLUMN_COUNT = 4
MIN_REGION_ID = 1
MAX_REGION_ID = 10
MAX_ROW_VALUE = (1 << COLUMN_COUNT) - 1

REGION_PAYLOAD_HEADER = 0x07
REGION_PAYLOAD_TRAILER = 0xFF
REGION_PAYLOAD_SIZE = 8


class RegionCommand(t.enum8):
    set = 0x01
    modify = 0x02
    delete = 0x03


class RegionAction(t.enum8):
    enter = 0x01
    leave = 0x02
    occupied = 0x04
    unoccupied = 0x08


@dataclasses.dataclass(frozen=True)
class RegionProfile:
    """Payload layout of one firmware generation."""

    name: str
    clear_command: RegionCommand


AQARA_FP1 = RegionProfile(name="aqara.fp1", clear_command=RegionCommand.delete)
# First generation drivers cleared a region by modifying it to an empty grid
AQARA_FP1_ZERO_MODIFY = RegionProfile(
    name="aqara.fp1.zero_modify", clear_command=RegionCommand.modify
)

PROFILES: dict[str, RegionProfile] = {
    profile.name: profile for profile in (AQARA_FP1, AQARA_FP1_ZERO_MODIFY)
}


def validate_region_id(region_id: int) -> None:
    if not MIN_REGION_ID <= region_id <= MAX_REGION_ID:
        raise ValidationError(
            f"Region must be between {MIN_REGION_ID} and {MAX_REGION_ID}: {region_id}"
        )


def validate_rows(rows: typing.Sequence[int]) -> None:
    if len(rows) != ROW_COUNT:
        raise ValidationError(f"Grid must contain {ROW_COUNT} row values: {rows!r}")

    for row in rows:
        if not 0 <= row <= MAX_ROW_VALUE:
            raise ValidationError(f"Invalid grid row value: {row!r}")


def validate_box(top: int, bottom: int, left: int, right: int) -> None:
    if not (0 <= left <= COLUMN_COUNT and left <= right <= COLUMN_COUNT):
        raise ValidationError(f"Invalid horizontal value: {[left, right]}")

    if not (1 <= top <= ROW_COUNT and top <= bottom <= ROW_COUNT):
        raise ValidationError(f"Invalid vertical value: {[top, bottom]}")


@dataclasses.dataclass(frozen=True)
class DetectionRegion:
    region_id: int
    # One nibble per row, index 0 is the top row
    rows: tuple[int, ...]

    def __post_init__(self) -> None:
        validate_region_id(self.region_id)
        validate_rows(self.rows)

    @classmethod
    def from_box(
        cls, region_id: int, top: int, bottom: int, left: int, right: int
    ) -> DetectionRegion:
        validate_region_id(region_id)
        return cls(region_id, RegionCodec.encode_rows(top, bottom, left, right))

    @classmethod
    def from_grid(cls, region_id: int, rows: typing.Iterable[int]) -> DetectionRegion:
        return cls(region_id, tuple(rows))

    @classmethod
    def cleared(cls, region_id: int) -> DetectionRegion:
        return cls(region_id, (0,) * ROW_COUNT)

    @property
    def is_cleared(self) -> bool:
        return not any(self.rows)

    def __repr__(self) -> str:
        rows = " ".join(f"{row:X}" for row in self.rows)
        return f"{type(self).__name__}(region_id={self.region_id}, rows=[{rows}])"


@dataclasses.dataclass(frozen=True)
class RegionEvent:
    region_id: int
    action: RegionAction | None
    raw_action: int


class RegionCodec:
    def __init__(self, profile: RegionProfile | str = AQARA_FP1) -> None:
        if isinstance(profile, str):
            try:
                profile = PROFILES[profile]
            except KeyError:
                raise ValueError(f"Unknown region profile {profile!r}") from None

        self.profile = profile

    @staticmethod
    def row_value(left: int, right: int) -> int:
        """Contiguous run of columns `left` to `right`, 1-indexed."""
        if left + right <= 0:
            return 0

        # A zero left edge with a non-zero right edge starts at the first column
        return (1 << right) - (1 << (max(left, 1) - 1))

    @classmethod
    def encode_rows(
        cls, top: int, bottom: int, left: int, right: int
    ) -> tuple[int, ...]:
        validate_box(top, bottom, left, right)
        value = cls.row_value(left, right)

        return tuple(
            value if top - 1 <= index <= bottom - 1 else 0 for index in range(ROW_COUNT)
        )

    def encode_region(self, region: DetectionRegion) -> bytes:
        if region.is_cleared:
            return self.clear_payload(region.region_id)

        return self.set_payload(region.region_id, region.rows)

    def encode(
        self, region_id: int, top: int, bottom: int, left: int, right: int
    ) -> bytes:
        return self.encode_region(
            DetectionRegion.from_box(region_id, top, bottom, left, right)
        )

    @staticmethod
    def set_payload(region_id: int, rows: typing.Sequence[int]) -> bytes:
        validate_region_id(region_id)
        validate_rows(rows)

        return bytes(
            [
                REGION_PAYLOAD_HEADER,
                RegionCommand.set,
                region_id,
                (rows[1] << 4) | rows[0],
                (rows[3] << 4) | rows[2],
                (rows[5] << 4) | rows[4],
                rows[6],
                REGION_PAYLOAD_TRAILER,
            ]
        )

    def clear_payload(self, region_id: int) -> bytes:
        validate_region_id(region_id)

        return bytes(
            [REGION_PAYLOAD_HEADER, self.profile.clear_command, region_id, 0, 0, 0, 0, 0]
        )

    def decode_payload(self, payload: bytes | str) -> DetectionRegion:
        if isinstance(payload, str):
            payload = _hex_to_bytes(payload)

        if len(payload) != REGION_PAYLOAD_SIZE or payload[0] != REGION_PAYLOAD_HEADER:
            raise ParsingError(f"Not a region payload: {payload.hex()}")

        command, region_id = payload[1], payload[2]

        try:
            if command in (RegionCommand.modify, RegionCommand.delete):
                return DetectionRegion.cleared(region_id)
            elif command != RegionCommand.set:
                raise ParsingError(f"Unknown region command 0x{command:02X}")

            rows = (
                payload[3] & 0x0F,
                payload[3] >> 4,
                payload[4] & 0x0F,
                payload[4] >> 4,
                payload[5] & 0x0F,
                payload[5] >> 4,
                payload[6] & 0x0F,
            )
            return DetectionRegion(region_id, rows)
        except ValidationError as exc:
            raise ParsingError(f"Invalid region payload {payload.hex()}: {exc}") from exc

    @staticmethod
    def encode_mask(rows: typing.Sequence[int]) -> int:
        validate_rows(rows)
        return sum(row << (4 * index) for index, row in enumerate(rows))

    @classmethod
    def mask_hex(cls, rows: typing.Sequence[int]) -> str:
        """The mask as printed by the hub, ``0<row7>...<row1>``."""
        return f"{cls.encode_mask(rows):08X}"

    @staticmethod
    def decode_mask(value: int | str) -> tuple[int, ...]:
        if isinstance(value, str):
            value = int(value, 16)

        return tuple((value >> (4 * index)) & 0x0F for index in range(ROW_COUNT))

    @staticmethod
    def decode_event(value: bytes | str) -> RegionEvent:
        """Region id and action from a 0x0151 report, ``0304`` is region 3 occupied."""
        if isinstance(value, str):
            value = _hex_to_bytes(value)

        if len(value) < 2:
            raise ParsingError(f"Region event is too short: {value.hex()}")

        region_id, raw_action = value[0], value[1]

        # Only one bit is expected to be set
        for action in RegionAction:
            if raw_action & action:
                break
        else:
            LOGGER.warning(
                "Unknown action 0x%02X for region %d", raw_action, region_id
            )
            action = None

        return RegionEvent(region_id=region_id, action=action, raw_action=raw_action)


def _hex_to_bytes(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ParsingError(f"Not a hex string: {value!r}") from exc
