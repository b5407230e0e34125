from __future__ import annotations

from . import basic


def _hex_string_to_bytes(hex_string: str) -> bytes:
    """Parses a hex string with optional colon delimiters and whitespace into bytes."""

    # Strips out whitespace and colons
    cleaned = "".join(hex_string.replace(":", "").split()).upper()
    return bytes.fromhex(cleaned)


class EUI64(bytes):
    # EUI 64-bit ID (an IEEE address), stored little endian as sent on the wire
    def __new__(cls, value: bytes = b"\x00" * 8):
        if len(value) != 8:
            raise ValueError(f"EUI64 must be 8 bytes long: {value!r}")

        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return ":".join(f"{i:02x}" for i in self[::-1])

    __str__ = __repr__

    def __hash__(self) -> int:
        return hash(repr(self))

    def serialize(self) -> bytes:
        return bytes(self)

    @classmethod
    def deserialize(cls, data: bytes) -> tuple[EUI64, bytes]:
        if len(data) < 8:
            raise ValueError("Data is too short to contain an EUI64")

        return cls(data[:8]), data[8:]

    @classmethod
    def convert(cls, ieee: str) -> EUI64:
        if ieee is None:
            return None
        return cls(_hex_string_to_bytes(ieee)[::-1])


class NWK(basic.uint16_t, repr="hex"):
    pass
