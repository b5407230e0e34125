"""Outbound instructions.

Driver operations never talk to a radio, they return an ordered list of these
instructions for the transport to execute. `Delay` markers must be honoured
between the instructions around them.
"""

from __future__ import annotations

import dataclasses
import enum
import typing

import zigwire.types as t
from zigwire.zcl import foundation

# ZDO profile clusters
ZDO_BIND_REQ = 0x0021
ZDO_UNBIND_REQ = 0x0022

# Addressing mode of a bind destination given by IEEE address and endpoint
BIND_DST_ADDR_MODE_IEEE = 0x03


@dataclasses.dataclass(frozen=True)
class ReadAttributes:
    cluster_id: int
    attribute_ids: tuple[int, ...]
    manufacturer: int | None = None
    endpoint: int = 1

    def serialize(self, tsn: int) -> bytes:
        hdr = foundation.ZCLHeader.general(
            tsn, foundation.GeneralCommand.Read_Attributes, self.manufacturer
        )
        return hdr.serialize() + b"".join(
            t.uint16_t(attr_id).serialize() for attr_id in self.attribute_ids
        )


@dataclasses.dataclass(frozen=True)
class WriteAttributes:
    cluster_id: int
    attribute_id: int
    data_type: foundation.DataType
    value: int | bytes | str
    manufacturer: int | None = None
    endpoint: int = 1

    def serialize(self, tsn: int) -> bytes:
        hdr = foundation.ZCLHeader.general(
            tsn, foundation.GeneralCommand.Write_Attributes, self.manufacturer
        )
        return (
            hdr.serialize()
            + t.uint16_t(self.attribute_id).serialize()
            + t.uint8_t(self.data_type.type_id).serialize()
            + self.data_type.serialize_value(self.value)
        )


@dataclasses.dataclass(frozen=True)
class ConfigureReporting:
    cluster_id: int
    attribute_id: int
    data_type: foundation.DataType
    min_interval: int
    max_interval: int
    reportable_change: int = 0
    manufacturer: int | None = None
    endpoint: int = 1

    def serialize(self, tsn: int) -> bytes:
        hdr = foundation.ZCLHeader.general(
            tsn, foundation.GeneralCommand.Configure_Reporting, self.manufacturer
        )
        data = (
            hdr.serialize()
            + foundation.ReportingDirection.SendReports.serialize()
            + t.uint16_t(self.attribute_id).serialize()
            + t.uint8_t(self.data_type.type_id).serialize()
            + t.uint16_t(self.min_interval).serialize()
            + t.uint16_t(self.max_interval).serialize()
        )

        # Only analog types carry a reportable change
        if self.data_type.type_class is foundation.DataClass.Analog:
            data += self.data_type.serialize_value(self.reportable_change)

        return data


@dataclasses.dataclass(frozen=True)
class ClusterCommand:
    cluster_id: int
    command_id: int
    payload: bytes = b""
    manufacturer: int | None = None
    endpoint: int = 1

    def serialize(self, tsn: int) -> bytes:
        hdr = foundation.ZCLHeader.cluster(tsn, self.command_id, self.manufacturer)
        return hdr.serialize() + self.payload


@dataclasses.dataclass(frozen=True)
class Delay:
    milliseconds: int


class BindAction(str, enum.Enum):
    bind = "bind"
    unbind = "unbind"


@dataclasses.dataclass(frozen=True)
class ZdoBind:
    action: BindAction
    src_nwk: t.NWK
    src_ieee: t.EUI64
    src_endpoint: int
    cluster_id: int
    dst_ieee: t.EUI64
    dst_endpoint: int

    @property
    def zdo_cluster_id(self) -> int:
        return ZDO_BIND_REQ if self.action == BindAction.bind else ZDO_UNBIND_REQ

    def serialize(self, tsn: int) -> bytes:
        return (
            t.uint8_t(tsn).serialize()
            + self.src_ieee.serialize()
            + t.uint8_t(self.src_endpoint).serialize()
            + t.uint16_t(self.cluster_id).serialize()
            + t.uint8_t(BIND_DST_ADDR_MODE_IEEE).serialize()
            + self.dst_ieee.serialize()
            + t.uint8_t(self.dst_endpoint).serialize()
        )


Instruction = typing.Union[
    ReadAttributes, WriteAttributes, ConfigureReporting, ClusterCommand, Delay, ZdoBind
]


def with_delay(instruction: Instruction, delay_ms: int) -> list[Instruction]:
    """`instruction` followed by a delay marker when `delay_ms` is positive."""
    if delay_ms > 0:
        return [instruction, Delay(delay_ms)]

    return [instruction]
