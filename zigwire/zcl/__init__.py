from __future__ import annotations

from zigwire.zcl.frame import AttributeRecord, FrameCodec, ZclFrame
from zigwire.zcl.global_commands import GlobalCommandInterpreter, GlobalCommandResult

__all__ = [
    "AttributeRecord",
    "FrameCodec",
    "GlobalCommandInterpreter",
    "GlobalCommandResult",
    "ZclFrame",
]
