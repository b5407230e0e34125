from __future__ import annotations

import dataclasses
import enum
import functools
import logging

from typing_extensions import Self

import zigwire.types as t

_LOGGER = logging.getLogger(__name__)


class Status(t.enum8):
    SUCCESS = 0x00  # Operation was successful.
    FAILURE = 0x01  # Operation was not successful
    NOT_AUTHORIZED = 0x7E  # The sender of the command does not have
    RESERVED_FIELD_NOT_ZERO = 0x7F  # A reserved field/subfield/bit contains a
    MALFORMED_COMMAND = 0x80  # The command appears to contain the wrong
    UNSUP_CLUSTER_COMMAND = 0x81  # The specified cluster command is not
    UNSUP_GENERAL_COMMAND = 0x82  # The specified general ZCL command is not
    UNSUP_MANUF_CLUSTER_COMMAND = 0x83  # A manufacturer specific unicast,
    UNSUP_MANUF_GENERAL_COMMAND = 0x84  # A manufacturer specific unicast, ZCL
    INVALID_FIELD = 0x85  # At least one field of the command contains an
    UNSUPPORTED_ATTRIBUTE = 0x86  # The specified attribute does not exist on
    INVALID_VALUE = 0x87  # Out of range error, or set to a reserved value.
    READ_ONLY = 0x88  # Attempt to write a read only attribute.
    INSUFFICIENT_SPACE = 0x89  # An operation (e.g. an attempt to create an
    NOT_FOUND = 0x8B  # The requested information (e.g. table entry)
    UNREPORTABLE_ATTRIBUTE = 0x8C  # Periodic reports cannot be issued for this
    INVALID_DATA_TYPE = 0x8D  # The data type given for an attribute is
    INVALID_SELECTOR = 0x8E  # The selector for an attribute is incorrect.
    WRITE_ONLY = 0x8F  # A request has been made to read an attribute
    INCONSISTENT_STARTUP_STATE = 0x90  # Setting the requested values would put
    DEFINED_OUT_OF_BAND = 0x91  # An attempt has been made to write an
    ACTION_DENIED = 0x93  # The credentials presented by the device sending the
    TIMEOUT = 0x94  # The exchange was aborted due to excessive response time
    HARDWARE_FAILURE = 0xC0  # An operation was unsuccessful due to a
    SOFTWARE_FAILURE = 0xC1  # An operation was unsuccessful due to a
    CALIBRATION_ERROR = 0xC2  # An error occurred during calibration
    UNSUPPORTED_CLUSTER = 0xC3  # The cluster is not supported


class DataClass(enum.Enum):
    Null = 0
    Analog = 1
    Discrete = 2
    Composite = 3


class DataTypeId(t.enum8):
    unk = 0xFF
    nodata = 0x00
    data8 = 0x08
    data16 = 0x09
    data24 = 0x0A
    data32 = 0x0B
    data40 = 0x0C
    data48 = 0x0D
    data56 = 0x0E
    data64 = 0x0F
    bool_ = 0x10
    map8 = 0x18
    map16 = 0x19
    map24 = 0x1A
    map32 = 0x1B
    map40 = 0x1C
    map48 = 0x1D
    map56 = 0x1E
    map64 = 0x1F
    uint8 = 0x20
    uint16 = 0x21
    uint24 = 0x22
    uint32 = 0x23
    uint40 = 0x24
    uint48 = 0x25
    uint56 = 0x26
    uint64 = 0x27
    int8 = 0x28
    int16 = 0x29
    int24 = 0x2A
    int32 = 0x2B
    int40 = 0x2C
    int48 = 0x2D
    int56 = 0x2E
    int64 = 0x2F
    enum8 = 0x30
    enum16 = 0x31
    semi = 0x38
    single = 0x39
    double = 0x3A
    octstr = 0x41
    string = 0x42
    octstr16 = 0x43
    string16 = 0x44
    array = 0x48
    struct = 0x4C
    set = 0x50
    bag = 0x51
    ToD = 0xE0
    date = 0xE1
    UTC = 0xE2
    clusterId = 0xE8  # noqa: N815
    attribId = 0xE9  # noqa: N815
    bacOID = 0xEA  # noqa: N815
    EUI64 = 0xF0
    key128 = 0xF1


@dataclasses.dataclass(frozen=True)
class DataTypeInfo:
    type_id: DataTypeId
    type_class: DataClass
    # Fixed byte width, `None` for variable length types
    width: int | None
    # Size of the length prefix of string types
    prefix_length: int | None
    description: str


class DataType(DataTypeInfo, enum.Enum):
    unk = (DataTypeId.unk, DataClass.Null, None, None, "Unknown")
    nodata = (DataTypeId.nodata, DataClass.Null, 0, None, "No data")
    data8 = (DataTypeId.data8, DataClass.Discrete, 1, None, "General")
    data16 = (DataTypeId.data16, DataClass.Discrete, 2, None, "General")
    data24 = (DataTypeId.data24, DataClass.Discrete, 3, None, "General")
    data32 = (DataTypeId.data32, DataClass.Discrete, 4, None, "General")
    data40 = (DataTypeId.data40, DataClass.Discrete, 5, None, "General")
    data48 = (DataTypeId.data48, DataClass.Discrete, 6, None, "General")
    data56 = (DataTypeId.data56, DataClass.Discrete, 7, None, "General")
    data64 = (DataTypeId.data64, DataClass.Discrete, 8, None, "General")
    bool_ = (DataTypeId.bool_, DataClass.Discrete, 1, None, "Boolean")
    map8 = (DataTypeId.map8, DataClass.Discrete, 1, None, "Bitmap")
    map16 = (DataTypeId.map16, DataClass.Discrete, 2, None, "Bitmap")
    map24 = (DataTypeId.map24, DataClass.Discrete, 3, None, "Bitmap")
    map32 = (DataTypeId.map32, DataClass.Discrete, 4, None, "Bitmap")
    map40 = (DataTypeId.map40, DataClass.Discrete, 5, None, "Bitmap")
    map48 = (DataTypeId.map48, DataClass.Discrete, 6, None, "Bitmap")
    map56 = (DataTypeId.map56, DataClass.Discrete, 7, None, "Bitmap")
    map64 = (DataTypeId.map64, DataClass.Discrete, 8, None, "Bitmap")
    uint8 = (DataTypeId.uint8, DataClass.Analog, 1, None, "Unsigned 8-bit integer")
    uint16 = (DataTypeId.uint16, DataClass.Analog, 2, None, "Unsigned 16-bit integer")
    uint24 = (DataTypeId.uint24, DataClass.Analog, 3, None, "Unsigned 24-bit integer")
    uint32 = (DataTypeId.uint32, DataClass.Analog, 4, None, "Unsigned 32-bit integer")
    uint40 = (DataTypeId.uint40, DataClass.Analog, 5, None, "Unsigned 40-bit integer")
    uint48 = (DataTypeId.uint48, DataClass.Analog, 6, None, "Unsigned 48-bit integer")
    uint56 = (DataTypeId.uint56, DataClass.Analog, 7, None, "Unsigned 56-bit integer")
    uint64 = (DataTypeId.uint64, DataClass.Analog, 8, None, "Unsigned 64-bit integer")
    int8 = (DataTypeId.int8, DataClass.Analog, 1, None, "Signed 8-bit integer")
    int16 = (DataTypeId.int16, DataClass.Analog, 2, None, "Signed 16-bit integer")
    int24 = (DataTypeId.int24, DataClass.Analog, 3, None, "Signed 24-bit integer")
    int32 = (DataTypeId.int32, DataClass.Analog, 4, None, "Signed 32-bit integer")
    int40 = (DataTypeId.int40, DataClass.Analog, 5, None, "Signed 40-bit integer")
    int48 = (DataTypeId.int48, DataClass.Analog, 6, None, "Signed 48-bit integer")
    int56 = (DataTypeId.int56, DataClass.Analog, 7, None, "Signed 56-bit integer")
    int64 = (DataTypeId.int64, DataClass.Analog, 8, None, "Signed 64-bit integer")
    enum8 = (DataTypeId.enum8, DataClass.Discrete, 1, None, "8-bit enumeration")
    enum16 = (DataTypeId.enum16, DataClass.Discrete, 2, None, "16-bit enumeration")
    semi = (DataTypeId.semi, DataClass.Analog, 2, None, "Semi-precision")
    single = (DataTypeId.single, DataClass.Analog, 4, None, "Single precision")
    double = (DataTypeId.double, DataClass.Analog, 8, None, "Double precision")
    octstr = (DataTypeId.octstr, DataClass.Discrete, None, 1, "Octet string")
    string = (DataTypeId.string, DataClass.Discrete, None, 1, "Character string")
    octstr16 = (DataTypeId.octstr16, DataClass.Discrete, None, 2, "Long octet string")
    string16 = (DataTypeId.string16, DataClass.Discrete, None, 2, "Long char string")
    array = (DataTypeId.array, DataClass.Composite, None, None, "Array")
    struct = (DataTypeId.struct, DataClass.Composite, None, None, "Structure")
    set = (DataTypeId.set, DataClass.Composite, None, None, "Set")
    bag = (DataTypeId.bag, DataClass.Composite, None, None, "Bag")
    ToD = (DataTypeId.ToD, DataClass.Analog, 4, None, "Time of day")
    date = (DataTypeId.date, DataClass.Analog, 4, None, "Date")
    UTC = (DataTypeId.UTC, DataClass.Analog, 4, None, "UTCTime")
    clusterId = (DataTypeId.clusterId, DataClass.Discrete, 2, None, "Cluster ID")  # noqa: N815
    attribId = (DataTypeId.attribId, DataClass.Discrete, 2, None, "Attribute ID")  # noqa: N815
    bacOID = (DataTypeId.bacOID, DataClass.Discrete, 4, None, "BACnet OID")  # noqa: N815
    EUI64 = (DataTypeId.EUI64, DataClass.Discrete, 8, None, "IEEE address")
    key128 = (DataTypeId.key128, DataClass.Discrete, 16, None, "128-bit security key")

    @property
    def is_length_prefixed(self) -> bool:
        return self.prefix_length is not None

    @property
    def is_text(self) -> bool:
        return self.type_id in (DataTypeId.string, DataTypeId.string16)

    @classmethod
    @functools.cache
    def _data_type_index(cls: type[Self]) -> dict[int, Self]:  # noqa: N805
        return {d.type_id: d for d in cls}

    @classmethod
    def from_type_id(cls: type[Self], type_id: int) -> Self:
        return cls._data_type_index()[type_id]

    def serialize_value(self, value: int | bytes | str) -> bytes:
        """Serialize a value the way it is carried inside a ZCL attribute record."""
        if self.is_length_prefixed:
            if isinstance(value, str):
                value = value.encode("utf8")

            prefixed = t.LVBytes if self.prefix_length == 1 else t.LongOctetString
            return prefixed(value).serialize()

        if self.width is None:
            raise ValueError(f"Cannot serialize values of {self.description} type")

        if isinstance(value, (bytes, bytearray)):
            if len(value) != self.width:
                raise ValueError(f"{self.description} value must be {self.width} bytes")
            return bytes(value)

        return int(value).to_bytes(
            self.width, "little", signed=self.type_class is DataClass.Analog and value < 0
        )

    def deserialize_value(self, data: bytes) -> tuple[bytes, bytes]:
        """Split the wire bytes of one value from `data`, without any length prefix."""
        if self.is_length_prefixed:
            prefixed = t.LVBytes if self.prefix_length == 1 else t.LongOctetString
            value, data = prefixed.deserialize(data)
            return bytes(value), data

        if self.width is None:
            raise ValueError(f"Cannot deserialize values of {self.description} type")

        if len(data) < self.width:
            raise ValueError(f"Data is too short to contain {self.width} bytes")

        return data[: self.width], data[self.width :]


class GeneralCommand(t.enum8):
    """ZCL Foundation General Command IDs."""

    Read_Attributes = 0x00
    Read_Attributes_rsp = 0x01
    Write_Attributes = 0x02
    Write_Attributes_Undivided = 0x03
    Write_Attributes_rsp = 0x04
    Write_Attributes_No_Response = 0x05
    Configure_Reporting = 0x06
    Configure_Reporting_rsp = 0x07
    Read_Reporting_Configuration = 0x08
    Read_Reporting_Configuration_rsp = 0x09
    Report_Attributes = 0x0A
    Default_Response = 0x0B
    Discover_Attributes = 0x0C
    Discover_Attributes_rsp = 0x0D


# Global commands whose payload is a list of attribute records
ATTRIBUTE_REPORT_COMMANDS = frozenset(
    {GeneralCommand.Read_Attributes_rsp, GeneralCommand.Report_Attributes}
)


class ReportingDirection(t.enum8):
    SendReports = 0x00
    ReceiveReports = 0x01


class FrameType(t.enum8):
    """ZCL Frame Type."""

    GLOBAL_COMMAND = 0b00
    CLUSTER_COMMAND = 0b01
    RESERVED_2 = 0b10
    RESERVED_3 = 0b11


class Direction(t.enum8):
    """ZCL frame control direction."""

    Client_to_Server = 0
    Server_to_Client = 1


class FrameControl(t.bitmap8):
    """The frame control field contains information defining the command type
    and other control flags.
    """

    CLUSTER_COMMAND = 0b00000001
    RESERVED_FRAME_TYPE = 0b00000010
    MANUFACTURER_SPECIFIC = 0b00000100
    SERVER_TO_CLIENT = 0b00001000
    DISABLE_DEFAULT_RESPONSE = 0b00010000

    @classmethod
    def build(
        cls,
        frame_type: FrameType,
        direction: Direction = Direction.Client_to_Server,
        is_manufacturer_specific: bool = False,
    ) -> FrameControl:
        value = cls(frame_type)

        if is_manufacturer_specific:
            value |= cls.MANUFACTURER_SPECIFIC

        if direction == Direction.Server_to_Client:
            value |= cls.SERVER_TO_CLIENT | cls.DISABLE_DEFAULT_RESPONSE

        return value

    @property
    def frame_type(self) -> FrameType:
        return FrameType(int(self) & 0b11)

    @property
    def direction(self) -> Direction:
        return Direction(bool(self & self.SERVER_TO_CLIENT))

    @property
    def is_manufacturer_specific(self) -> bool:
        return bool(self & self.MANUFACTURER_SPECIFIC)

    @property
    def is_cluster(self) -> bool:
        """Return True if command is a local cluster specific command."""
        return self.frame_type == FrameType.CLUSTER_COMMAND

    @property
    def is_general(self) -> bool:
        """Return True if command is a global ZCL command."""
        return self.frame_type == FrameType.GLOBAL_COMMAND


@dataclasses.dataclass(frozen=True)
class ZCLHeader:
    frame_control: FrameControl
    tsn: int
    command_id: int
    manufacturer: int | None = None

    @classmethod
    def general(
        cls,
        tsn: int,
        command_id: int,
        manufacturer: int | None = None,
        direction: Direction = Direction.Client_to_Server,
    ) -> ZCLHeader:
        return cls(
            frame_control=FrameControl.build(
                FrameType.GLOBAL_COMMAND,
                direction=direction,
                is_manufacturer_specific=(manufacturer is not None),
            ),
            manufacturer=manufacturer,
            tsn=tsn,
            command_id=command_id,
        )

    @classmethod
    def cluster(
        cls,
        tsn: int,
        command_id: int,
        manufacturer: int | None = None,
        direction: Direction = Direction.Client_to_Server,
    ) -> ZCLHeader:
        return cls(
            frame_control=FrameControl.build(
                FrameType.CLUSTER_COMMAND,
                direction=direction,
                is_manufacturer_specific=(manufacturer is not None),
            ),
            manufacturer=manufacturer,
            tsn=tsn,
            command_id=command_id,
        )

    @property
    def direction(self) -> Direction:
        """Return direction of Frame Control."""
        return self.frame_control.direction

    def serialize(self) -> bytes:
        data = t.uint8_t(self.frame_control).serialize()

        if self.frame_control.is_manufacturer_specific:
            data += t.uint16_t(self.manufacturer).serialize()

        return data + t.uint8_t(self.tsn).serialize() + t.uint8_t(self.command_id).serialize()

    @classmethod
    def deserialize(cls, data: bytes) -> tuple[ZCLHeader, bytes]:
        frame_control, data = t.uint8_t.deserialize(data)
        frame_control = FrameControl(frame_control)
        manufacturer = None

        if frame_control.is_manufacturer_specific:
            manufacturer, data = t.uint16_t.deserialize(data)

        tsn, data = t.uint8_t.deserialize(data)
        command_id, data = t.uint8_t.deserialize(data)

        return (
            cls(
                frame_control=frame_control,
                tsn=tsn,
                command_id=command_id,
                manufacturer=manufacturer,
            ),
            data,
        )
