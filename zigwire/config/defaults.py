from __future__ import annotations

from zigwire.const import COMMAND_TIMEOUT, REGION_EVENT_QUIESCENCE

CONF_COMMAND_TIMEOUT_DEFAULT = COMMAND_TIMEOUT
CONF_HEALTH_CHECK_INTERVAL_DEFAULT = 10
CONF_SHADE_HEALTH_CHECK_INTERVAL_DEFAULT = 59
CONF_DELAY_MS_DEFAULT = 200

CONF_APPROACH_DISTANCE_DEFAULT = None
CONF_SENSITIVITY_LEVEL_DEFAULT = None
CONF_DIRECTION_MODE_DEFAULT = None
CONF_DETECTION_REGIONS_DEFAULT: dict = {}
CONF_INTERFERENCE_REGION_DEFAULT = None
CONF_EXIT_ENTRANCES_REGION_DEFAULT = None
CONF_EDGES_REGION_DEFAULT = None
CONF_PRESENCE_RESET_INTERVAL_DEFAULT = 0
CONF_REGION_EVENT_QUIESCENCE_DEFAULT = REGION_EVENT_QUIESCENCE
CONF_REGION_PROFILE_DEFAULT = "aqara.fp1"
CONF_TAG_PROFILE_DEFAULT = "standard"

CONF_INVERT_COMMANDS_DEFAULT = False
CONF_INVERT_POSITION_DEFAULT = False
