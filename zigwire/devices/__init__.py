"""Device drivers."""

from __future__ import annotations

from zigwire.devices.aqara import PresenceSensorFP1
from zigwire.devices.smartwings import WindowCoveringShade

__all__ = ["PresenceSensorFP1", "WindowCoveringShade"]
