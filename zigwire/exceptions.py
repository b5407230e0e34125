from __future__ import annotations


class ZigwireException(Exception):
    """Base exception class"""


class ParsingError(ZigwireException):
    """Failed to parse a frame or a manufacturer TLV stream"""


WireParseError = ParsingError


class ValidationError(ZigwireException, ValueError):
    """Caller supplied region coordinates or ids are out of range"""


class ProtocolStatusError(ZigwireException):
    """A ZCL response carried a non-zero status code"""

    def __init__(
        self,
        message: str,
        *,
        cluster_id: int,
        command_id: int | None,
        status: int,
    ) -> None:
        super().__init__(message)
        self.cluster_id = cluster_id
        self.command_id = command_id
        self.status = status


class LivenessTimeout(ZigwireException):
    """No inbound frame arrived within the expected window"""

    def __init__(self, message: str, *, device_id: str, timeout: float) -> None:
        super().__init__(message)
        self.device_id = device_id
        self.timeout = timeout
