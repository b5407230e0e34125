"""Xiaomi / Aqara (LUMI) manufacturer cluster codecs."""

from __future__ import annotations

from zigwire.quirks.xiaomi.regions import (
    DetectionRegion,
    RegionAction,
    RegionCodec,
    RegionEvent,
    RegionProfile,
)
from zigwire.quirks.xiaomi.tags import TagDecoderProfile, XiaomiTag, XiaomiTagDecoder

__all__ = [
    "DetectionRegion",
    "RegionAction",
    "RegionCodec",
    "RegionEvent",
    "RegionProfile",
    "TagDecoderProfile",
    "XiaomiTag",
    "XiaomiTagDecoder",
]
