"""Zigwire Constants."""

from __future__ import annotations

# Seconds to wait for any inbound frame after a command that expects a reply
COMMAND_TIMEOUT = 10

# Milliseconds between consecutive zigbee commands
DELAY_MS = 200

# Seconds of quiet before buffered region events are flushed
REGION_EVENT_QUIESCENCE = 0.5

HEALTH_CHECK_INTERVALS = (0, 10, 15, 30, 45, 59)

# Manufacturer code used by Xiaomi / Aqara (LUMI)
XIAOMI_MFG_CODE = 0x115F

# Cluster IDs
BASIC_CLUSTER = 0x0000
POWER_CONFIGURATION_CLUSTER = 0x0001
ON_OFF_CLUSTER = 0x0006
LEVEL_CONTROL_CLUSTER = 0x0008
WINDOW_COVERING_CLUSTER = 0x0102
COLOR_CONTROL_CLUSTER = 0x0300
XIAOMI_CLUSTER = 0xFCC0

# Basic cluster attributes
PING_ATTR_ID = 0x0001
FIRMWARE_VERSION_ATTR_ID = 0x4000

# Power configuration attributes
BATTERY_PERCENT_REMAINING_ATTR_ID = 0x0021

# Window covering attributes and commands
LIFT_PERCENT_ATTR_ID = 0x0008
OPEN_CMD_ID = 0x00
CLOSE_CMD_ID = 0x01
STOP_CMD_ID = 0x02
GOTO_POSITION_CMD_ID = 0x05

# Xiaomi cluster attributes
XIAOMI_TAGS_ATTR_ID = 0x00F7
SENSITIVITY_LEVEL_ATTR_ID = 0x010C
PRESENCE_ATTR_ID = 0x0142
PRESENCE_ACTIONS_ATTR_ID = 0x0143
DIRECTION_MODE_ATTR_ID = 0x0144
TRIGGER_DISTANCE_ATTR_ID = 0x0146
SET_REGION_ATTR_ID = 0x0150
REGION_EVENT_ATTR_ID = 0x0151
SET_EXIT_REGION_ATTR_ID = 0x0153
SET_INTERFERENCE_ATTR_ID = 0x0154
SET_EDGE_REGION_ATTR_ID = 0x0156
RESET_PRESENCE_ATTR_ID = 0x0157

# Tags found inside the 0x00F7 TLV payload
SWBUILD_TAG_ID = 0x08
PRESENCE_TAG_ID = 0x65
PRESENCE_ACTION_TAG_ID = 0x66
SENSITIVITY_TAG_ID = 0x66
DIRECTION_MODE_TAG_ID = 0x67
TRIGGER_DISTANCE_TAG_ID = 0x69

CLUSTER_LABELS = {
    BASIC_CLUSTER: "Basic",
    POWER_CONFIGURATION_CLUSTER: "Power Configuration",
    ON_OFF_CLUSTER: "On/Off",
    LEVEL_CONTROL_CLUSTER: "Level Control",
    WINDOW_COVERING_CLUSTER: "Window Covering",
    COLOR_CONTROL_CLUSTER: "Color Control",
    XIAOMI_CLUSTER: "Xiaomi",
}


def cluster_lookup(cluster_id: int) -> str:
    """Human readable name of a cluster for log messages."""
    label = CLUSTER_LABELS.get(cluster_id)

    if label is None:
        return f"cluster 0x{cluster_id:04X}"

    return f"{label} (0x{cluster_id:04X}) cluster"
