"""Decoder for the TLV stream Xiaomi devices pack into attribute 0x00F7.

Each record is ``tag(1) type(1) value``. The value width comes from the ZCL
data type table, except for string types which carry a length prefix.
Numeric values are little endian and always reconstructed unsigned.
"""

from __future__ import annotations

import dataclasses
import logging
import typing

from zigwire.const import (
    DIRECTION_MODE_TAG_ID,
    PRESENCE_ACTION_TAG_ID,
    PRESENCE_TAG_ID,
    SENSITIVITY_TAG_ID,
    SWBUILD_TAG_ID,
    TRIGGER_DISTANCE_TAG_ID,
)
from zigwire.exceptions import ParsingError
from zigwire.zcl import foundation

LOGGER = logging.getLogger(__name__)

# tag id and type id
RECORD_HEADER_SIZE = 2


@dataclasses.dataclass(frozen=True)
class XiaomiTag:
    tag_id: int
    type_id: int
    value: int | str

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"tag_id=0x{self.tag_id:02X}, "
            f"type_id=0x{self.type_id:02X}, "
            f"value={self.value!r}"
            f")"
        )


@dataclasses.dataclass(frozen=True)
class TagDecoderProfile:
    """Named set of value widths used by one firmware family."""

    name: str
    width_overrides: typing.Mapping[int, int] = dataclasses.field(
        default_factory=dict
    )

    @staticmethod
    def _data_type(type_id: int) -> foundation.DataType:
        try:
            return foundation.DataType.from_type_id(type_id)
        except KeyError:
            raise ParsingError(f"Unknown tag data type 0x{type_id:02X}") from None

    def prefix_length(self, type_id: int) -> int | None:
        """Length prefix size of a string type, None for fixed width types."""
        if type_id in self.width_overrides:
            return None

        return self._data_type(type_id).prefix_length

    def width(self, type_id: int) -> int:
        if type_id in self.width_overrides:
            return self.width_overrides[type_id]

        data_type = self._data_type(type_id)

        if data_type.width is None:
            raise ParsingError(
                f"Tag data type 0x{type_id:02X} ({data_type.description}) has no"
                f" fixed width"
            )

        return data_type.width


STANDARD_PROFILE = TagDecoderProfile(name="standard")

# Some LUMI firmware is documented with a six byte uint40 (0x24). Which width is
# correct has not been confirmed against captures, so it is opt-in.
ALT_WIDTHS_PROFILE = TagDecoderProfile(
    name="lumi.alt_widths",
    width_overrides={foundation.DataTypeId.uint40: 6},
)

PROFILES: dict[str, TagDecoderProfile] = {
    profile.name: profile for profile in (STANDARD_PROFILE, ALT_WIDTHS_PROFILE)
}

# Tag 0x66 is the presence action on the FP1 and the sensitivity elsewhere
FP1_TAGS: dict[int, str] = {
    SWBUILD_TAG_ID: "software_build",
    PRESENCE_TAG_ID: "presence",
    PRESENCE_ACTION_TAG_ID: "presence_action",
    DIRECTION_MODE_TAG_ID: "direction_mode",
    TRIGGER_DISTANCE_TAG_ID: "trigger_distance",
}

MOTION_SENSOR_TAGS: dict[int, str] = {
    SWBUILD_TAG_ID: "software_build",
    SENSITIVITY_TAG_ID: "sensitivity",
}


class XiaomiTagDecoder:
    def __init__(self, profile: TagDecoderProfile | str = STANDARD_PROFILE) -> None:
        if isinstance(profile, str):
            profile = PROFILES[profile]

        self.profile = profile

    @staticmethod
    def _to_bytes(data: bytes | str) -> bytes:
        if isinstance(data, str):
            try:
                return bytes.fromhex(data)
            except ValueError as exc:
                raise ParsingError(f"Tag payload is not a hex string: {data!r}") from exc

        return bytes(data)

    def iter_tags(self, data: bytes | str) -> typing.Iterator[XiaomiTag]:
        data = self._to_bytes(data)

        # Fewer than three bytes cannot hold another record
        while len(data) > RECORD_HEADER_SIZE:
            tag_id, type_id = data[0], data[1]
            data = data[RECORD_HEADER_SIZE:]

            value: int | str
            prefix_length = self.profile.prefix_length(type_id)

            if prefix_length is not None:
                if len(data) < prefix_length:
                    raise ParsingError(
                        f"Tag 0x{tag_id:02X} needs a {prefix_length} byte length,"
                        f" {len(data)} remain"
                    )

                length = int.from_bytes(data[:prefix_length], "little")
                data = data[prefix_length:]
                raw = data[:length]

                if len(raw) != length:
                    raise ParsingError(
                        f"Tag 0x{tag_id:02X} string needs {length} bytes,"
                        f" {len(raw)} remain"
                    )

                value = raw.decode("utf8", errors="replace")
                data = data[length:]
            else:
                width = self.profile.width(type_id)
                raw = data[:width]

                if len(raw) != width:
                    raise ParsingError(
                        f"Tag 0x{tag_id:02X} needs {width} bytes, {len(raw)} remain"
                    )

                value = int.from_bytes(raw, "little")
                data = data[width:]

            LOGGER.debug(
                "Xiaomi decode tag=0x%02X, type=0x%02X, value=%r", tag_id, type_id, value
            )

            yield XiaomiTag(tag_id, type_id, value)

    def decode(self, data: bytes | str) -> dict[int, int | str]:
        """Map of tag id to value, later duplicates replace earlier ones."""
        return {tag.tag_id: tag.value for tag in self.iter_tags(data)}

    @staticmethod
    def name_tags(
        tags: typing.Mapping[int, int | str], table: typing.Mapping[int, str]
    ) -> dict[str, int | str]:
        """Known tags by their semantic name. Unknown tags are left out."""
        return {table[tag_id]: value for tag_id, value in tags.items() if tag_id in table}
