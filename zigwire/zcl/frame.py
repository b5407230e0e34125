"""Parsing of inbound ZCL messages into `ZclFrame` objects.

Three input shapes are understood:

* the attribute description produced by the hub for attribute reports,
  ``read attr - raw: ..., cluster: FCC0, attrId: 0142, encoding: 20, value: 01``
* the catch-all description used for every other message,
  ``catchall: 0104 0102 01 01 0040 00 0759 00 00 0000 0B 01 0500``
* a binary ZCL frame (header and payload) via `FrameCodec.from_zcl`

Attribute values are exposed most significant byte first for numeric types,
the way the hub prints them, so `int.from_bytes(value, "big")` is the value.
"""

from __future__ import annotations

import dataclasses
import logging

from zigwire.exceptions import ParsingError
import zigwire.types as t
from zigwire.zcl import foundation

LOGGER = logging.getLogger(__name__)

READ_ATTR_PREFIX = "read attr -"
CATCHALL_PREFIX = "catchall:"

# dni(2) endpoint(1) cluster(2) size(1)
RAW_ATTR_HEADER_SIZE = 6
CATCHALL_FIELD_COUNT = 12


@dataclasses.dataclass(frozen=True)
class AttributeRecord:
    """One attribute value carried by a frame."""

    attribute_id: int
    encoding: int | None
    value: bytes

    @property
    def value_int(self) -> int:
        return int.from_bytes(self.value, "big")

    @property
    def value_text(self) -> str:
        return self.value.decode("utf8", errors="replace")

    def __repr__(self) -> str:
        encoding = "None" if self.encoding is None else f"0x{self.encoding:02X}"
        return (
            f"{type(self).__name__}("
            f"attribute_id=0x{self.attribute_id:04X}, "
            f"encoding={encoding}, "
            f"value={self.value.hex().upper()}"
            f")"
        )


@dataclasses.dataclass(frozen=True)
class ZclFrame:
    """A parsed inbound ZCL message."""

    cluster_id: int
    command_id: int
    is_global: bool
    attribute_id: int | None = None
    encoding: int | None = None
    value: bytes = b""
    data: bytes = b""
    additional_attributes: tuple[AttributeRecord, ...] = ()
    manufacturer: int | None = None
    endpoint: int | None = None
    direction: foundation.Direction = foundation.Direction.Server_to_Client

    @property
    def value_int(self) -> int:
        return int.from_bytes(self.value, "big")

    @property
    def value_text(self) -> str:
        return self.value.decode("utf8", errors="replace")

    @property
    def has_attribute(self) -> bool:
        return self.attribute_id is not None

    @property
    def is_attribute_report(self) -> bool:
        return self.is_global and self.command_id in foundation.ATTRIBUTE_REPORT_COMMANDS

    @property
    def attributes(self) -> tuple[AttributeRecord, ...]:
        """The primary attribute followed by every additional one."""
        if self.attribute_id is None:
            return self.additional_attributes

        primary = AttributeRecord(self.attribute_id, self.encoding, self.value)
        return (primary, *self.additional_attributes)

    def with_attribute(self, record: AttributeRecord) -> ZclFrame:
        """Copy of this frame with `record` as the primary attribute."""
        return dataclasses.replace(
            self,
            attribute_id=record.attribute_id,
            encoding=record.encoding,
            value=record.value,
            additional_attributes=(),
        )

    def __repr__(self) -> str:
        r = f"{type(self).__name__}(cluster_id=0x{self.cluster_id:04X}"
        r += f", command_id=0x{self.command_id:02X}, is_global={self.is_global}"

        if self.attribute_id is not None:
            r += f", attribute_id=0x{self.attribute_id:04X}"
            r += f", value={self.value.hex().upper()}"

        if self.data:
            r += f", data={self.data.hex().upper()}"

        if self.additional_attributes:
            r += f", additional_attributes={list(self.additional_attributes)!r}"

        return r + ")"


def _hex_int(value: str, field: str) -> int:
    try:
        return int(value, 16)
    except ValueError as exc:
        raise ParsingError(f"Field {field!r} is not hexadecimal: {value!r}") from exc


def _hex_bytes(value: str, field: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ParsingError(f"Field {field!r} is not a hex string: {value!r}") from exc


def _display_order(data_type: foundation.DataType | None, raw: bytes) -> bytes:
    """Numeric values are carried little endian but displayed big endian."""
    if data_type is None or data_type.is_length_prefixed:
        return raw

    return raw[::-1]


def _data_type(encoding: int | None) -> foundation.DataType | None:
    if encoding is None:
        return None

    try:
        return foundation.DataType.from_type_id(encoding)
    except KeyError:
        return None


class FrameCodec:
    """Turns inbound message descriptions into `ZclFrame` objects."""

    @classmethod
    def parse(cls, description: str) -> ZclFrame:
        if not isinstance(description, str):
            raise ParsingError(f"Description must be a string: {description!r}")

        description = description.strip()

        if description.startswith(READ_ATTR_PREFIX):
            return cls._parse_read_attr(description[len(READ_ATTR_PREFIX) :])
        elif description.startswith(CATCHALL_PREFIX):
            return cls._parse_catchall(description[len(CATCHALL_PREFIX) :])

        raise ParsingError(f"Unrecognized message description: {description!r}")

    @classmethod
    def from_zcl(
        cls, cluster_id: int, data: bytes, *, endpoint: int | None = None
    ) -> ZclFrame:
        """Parse a binary ZCL frame received on `cluster_id`."""
        try:
            hdr, payload = foundation.ZCLHeader.deserialize(data)
        except ValueError as exc:
            raise ParsingError(f"Truncated ZCL header: {data!r}") from exc

        frame_type = hdr.frame_control.frame_type

        if frame_type not in (
            foundation.FrameType.GLOBAL_COMMAND,
            foundation.FrameType.CLUSTER_COMMAND,
        ):
            raise ParsingError(f"Reserved ZCL frame type {frame_type!r}")

        return cls._build(
            cluster_id=cluster_id,
            command_id=hdr.command_id,
            is_global=hdr.frame_control.is_general,
            payload=payload,
            manufacturer=hdr.manufacturer,
            endpoint=endpoint,
            direction=hdr.direction,
        )

    @staticmethod
    def _split_fields(body: str) -> dict[str, str]:
        fields = {}

        for item in body.split(","):
            item = item.strip()

            if not item:
                continue

            key, sep, value = item.partition(":")

            if not sep:
                raise ParsingError(f"Malformed description field: {item!r}")

            fields[key.strip()] = value.strip()

        return fields

    @classmethod
    def _parse_read_attr(cls, body: str) -> ZclFrame:
        fields = cls._split_fields(body)

        if "cluster" not in fields or "attrId" not in fields:
            raise ParsingError(f"Attribute description lacks cluster/attrId: {body!r}")

        cluster_id = _hex_int(fields["cluster"], "cluster")
        attribute_id = _hex_int(fields["attrId"], "attrId")
        command_id = _hex_int(
            fields.get("command", f"{foundation.GeneralCommand.Report_Attributes:02X}"),
            "command",
        )
        encoding = (
            _hex_int(fields["encoding"], "encoding") if "encoding" in fields else None
        )
        endpoint = (
            _hex_int(fields["endpoint"], "endpoint") if "endpoint" in fields else None
        )

        data_type = _data_type(encoding)
        raw_value = fields.get("value", "")

        if data_type is not None and data_type.is_text:
            value = raw_value.encode("utf8")
        else:
            value = _hex_bytes(raw_value, "value")

        additional: tuple[AttributeRecord, ...] = ()

        if "raw" in fields:
            additional = cls._additional_from_raw(
                _hex_bytes(fields["raw"], "raw"), cluster_id
            )

        return ZclFrame(
            cluster_id=cluster_id,
            command_id=command_id,
            is_global=True,
            attribute_id=attribute_id,
            encoding=encoding,
            value=value,
            additional_attributes=additional,
            endpoint=endpoint,
        )

    @classmethod
    def _additional_from_raw(
        cls, raw: bytes, cluster_id: int
    ) -> tuple[AttributeRecord, ...]:
        if len(raw) < RAW_ATTR_HEADER_SIZE:
            raise ParsingError(f"Raw attribute data is too short: {raw.hex()}")

        raw_cluster, _ = t.uint16_t_be.deserialize(raw[3:5])

        if raw_cluster != cluster_id:
            raise ParsingError(
                f"Raw cluster 0x{raw_cluster:04X} does not match 0x{cluster_id:04X}"
            )

        records = cls._parse_report_records(raw[RAW_ATTR_HEADER_SIZE:])

        # The first record is the primary attribute of the description
        return tuple(records[1:])

    @classmethod
    def _parse_catchall(cls, body: str) -> ZclFrame:
        tokens = body.split()

        if len(tokens) not in (CATCHALL_FIELD_COUNT, CATCHALL_FIELD_COUNT + 1):
            raise ParsingError(f"Catchall has {len(tokens)} fields: {body!r}")

        (
            _profile,
            cluster,
            src_ep,
            _dst_ep,
            _options,
            _msg_type,
            _dni,
            cluster_specific,
            mfr_specific,
            mfr_id,
            command,
            direction,
            *payload,
        ) = tokens

        return cls._build(
            cluster_id=_hex_int(cluster, "cluster"),
            command_id=_hex_int(command, "command"),
            is_global=_hex_int(cluster_specific, "clusterSpecific") == 0,
            payload=_hex_bytes(payload[0], "data") if payload else b"",
            manufacturer=(
                _hex_int(mfr_id, "manufacturerId")
                if _hex_int(mfr_specific, "manufacturerSpecific")
                else None
            ),
            endpoint=_hex_int(src_ep, "sourceEndpoint"),
            direction=foundation.Direction(_hex_int(direction, "direction") & 0x01),
        )

    @classmethod
    def _build(
        cls,
        *,
        cluster_id: int,
        command_id: int,
        is_global: bool,
        payload: bytes,
        manufacturer: int | None,
        endpoint: int | None,
        direction: foundation.Direction,
    ) -> ZclFrame:
        if is_global and command_id in foundation.ATTRIBUTE_REPORT_COMMANDS:
            if command_id == foundation.GeneralCommand.Read_Attributes_rsp:
                records = cls._parse_read_records(payload)
            else:
                records = cls._parse_report_records(payload)

            # Frames where every read failed fall through as plain global commands
            if records:
                primary, *additional = records

                return ZclFrame(
                    cluster_id=cluster_id,
                    command_id=command_id,
                    is_global=True,
                    attribute_id=primary.attribute_id,
                    encoding=primary.encoding,
                    value=primary.value,
                    additional_attributes=tuple(additional),
                    manufacturer=manufacturer,
                    endpoint=endpoint,
                    direction=direction,
                )

        return ZclFrame(
            cluster_id=cluster_id,
            command_id=command_id,
            is_global=is_global,
            data=payload,
            manufacturer=manufacturer,
            endpoint=endpoint,
            direction=direction,
        )

    @staticmethod
    def _parse_value(
        attribute_id: int, data: bytes
    ) -> tuple[AttributeRecord, bytes]:
        try:
            encoding, data = t.uint8_t.deserialize(data)
            data_type = foundation.DataType.from_type_id(encoding)
            raw, data = data_type.deserialize_value(data)
        except KeyError as exc:
            raise ParsingError(f"Unknown ZCL data type in record: {exc}") from exc
        except ValueError as exc:
            raise ParsingError(
                f"Truncated value for attribute 0x{attribute_id:04X}"
            ) from exc

        return AttributeRecord(attribute_id, encoding, _display_order(data_type, raw)), data

    @classmethod
    def _parse_report_records(cls, data: bytes) -> list[AttributeRecord]:
        records = []

        while data:
            try:
                attribute_id, data = t.uint16_t.deserialize(data)
            except ValueError as exc:
                raise ParsingError(f"Truncated attribute id: {data!r}") from exc

            record, data = cls._parse_value(attribute_id, data)
            records.append(record)

        return records

    @classmethod
    def _parse_read_records(cls, data: bytes) -> list[AttributeRecord]:
        records = []

        while data:
            try:
                attribute_id, data = t.uint16_t.deserialize(data)
                status, data = foundation.Status.deserialize(data)
            except ValueError as exc:
                raise ParsingError(f"Truncated read attribute record: {data!r}") from exc

            if status != foundation.Status.SUCCESS:
                LOGGER.debug(
                    "Attribute 0x%04X read failed with status %s", attribute_id, status
                )
                continue

            record, data = cls._parse_value(attribute_id, data)
            records.append(record)

        return records
