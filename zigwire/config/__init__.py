"""Config schemas and validation."""

from __future__ import annotations

import voluptuous as vol

from zigwire.config.defaults import (
    CONF_APPROACH_DISTANCE_DEFAULT,
    CONF_COMMAND_TIMEOUT_DEFAULT,
    CONF_DELAY_MS_DEFAULT,
    CONF_DETECTION_REGIONS_DEFAULT,
    CONF_DIRECTION_MODE_DEFAULT,
    CONF_EDGES_REGION_DEFAULT,
    CONF_EXIT_ENTRANCES_REGION_DEFAULT,
    CONF_HEALTH_CHECK_INTERVAL_DEFAULT,
    CONF_INTERFERENCE_REGION_DEFAULT,
    CONF_INVERT_COMMANDS_DEFAULT,
    CONF_INVERT_POSITION_DEFAULT,
    CONF_PRESENCE_RESET_INTERVAL_DEFAULT,
    CONF_REGION_EVENT_QUIESCENCE_DEFAULT,
    CONF_REGION_PROFILE_DEFAULT,
    CONF_SENSITIVITY_LEVEL_DEFAULT,
    CONF_SHADE_HEALTH_CHECK_INTERVAL_DEFAULT,
    CONF_TAG_PROFILE_DEFAULT,
)
from zigwire.config.validators import (
    cv_boolean,
    cv_int_choice,
    cv_region,
    cv_region_id,
    cv_region_profile,
    cv_tag_profile,
)
from zigwire.const import HEALTH_CHECK_INTERVALS

CONF_APPROACH_DISTANCE = "approach_distance"
CONF_COMMAND_TIMEOUT = "command_timeout"
CONF_DELAY_MS = "delay_ms"
CONF_DETECTION_REGIONS = "detection_regions"
CONF_DIRECTION_MODE = "direction_mode"
CONF_EDGES_REGION = "edges_region"
CONF_EXIT_ENTRANCES_REGION = "exit_entrances_region"
CONF_HEALTH_CHECK_INTERVAL = "health_check_interval"
CONF_INTERFERENCE_REGION = "interference_region"
CONF_INVERT_COMMANDS = "invert_commands"
CONF_INVERT_POSITION = "invert_position"
CONF_PRESENCE_RESET_INTERVAL = "presence_reset_interval"
CONF_REGION_EVENT_QUIESCENCE = "region_event_quiescence"
CONF_REGION_PROFILE = "region_profile"
CONF_SENSITIVITY_LEVEL = "sensitivity_level"
CONF_TAG_PROFILE = "tag_profile"

APPROACH_DISTANCES = {0x00: "Far (3m)", 0x01: "Medium (2m)", 0x02: "Near (1m)"}
SENSITIVITY_LEVELS = {0x01: "Low", 0x02: "Medium", 0x03: "High"}
DIRECTION_MODES = {
    0x00: "Undirected Enter/Leave",
    0x01: "Left & Right Enter/Leave",
}
# Hours
PRESENCE_RESET_INTERVALS = (0, 1, 2, 4, 8, 12)

SCHEMA_HEALTH = vol.Schema(
    {
        vol.Optional(
            CONF_HEALTH_CHECK_INTERVAL, default=CONF_HEALTH_CHECK_INTERVAL_DEFAULT
        ): cv_int_choice(*HEALTH_CHECK_INTERVALS),
        vol.Optional(CONF_COMMAND_TIMEOUT, default=CONF_COMMAND_TIMEOUT_DEFAULT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional(CONF_DELAY_MS, default=CONF_DELAY_MS_DEFAULT): vol.All(
            int, vol.Range(min=0)
        ),
    },
    extra=vol.ALLOW_EXTRA,
)

SCHEMA_FP1 = SCHEMA_HEALTH.extend(
    {
        vol.Optional(
            CONF_APPROACH_DISTANCE, default=CONF_APPROACH_DISTANCE_DEFAULT
        ): vol.Any(None, cv_int_choice(*APPROACH_DISTANCES)),
        vol.Optional(
            CONF_SENSITIVITY_LEVEL, default=CONF_SENSITIVITY_LEVEL_DEFAULT
        ): vol.Any(None, cv_int_choice(*SENSITIVITY_LEVELS)),
        vol.Optional(CONF_DIRECTION_MODE, default=CONF_DIRECTION_MODE_DEFAULT): vol.Any(
            None, cv_int_choice(*DIRECTION_MODES)
        ),
        vol.Optional(
            CONF_DETECTION_REGIONS, default=CONF_DETECTION_REGIONS_DEFAULT
        ): vol.Schema({cv_region_id: vol.Any(None, cv_region)}),
        vol.Optional(
            CONF_INTERFERENCE_REGION, default=CONF_INTERFERENCE_REGION_DEFAULT
        ): vol.Any(None, cv_region),
        vol.Optional(
            CONF_EXIT_ENTRANCES_REGION, default=CONF_EXIT_ENTRANCES_REGION_DEFAULT
        ): vol.Any(None, cv_region),
        vol.Optional(CONF_EDGES_REGION, default=CONF_EDGES_REGION_DEFAULT): vol.Any(
            None, cv_region
        ),
        vol.Optional(
            CONF_PRESENCE_RESET_INTERVAL, default=CONF_PRESENCE_RESET_INTERVAL_DEFAULT
        ): cv_int_choice(*PRESENCE_RESET_INTERVALS),
        vol.Optional(
            CONF_REGION_EVENT_QUIESCENCE, default=CONF_REGION_EVENT_QUIESCENCE_DEFAULT
        ): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional(
            CONF_REGION_PROFILE, default=CONF_REGION_PROFILE_DEFAULT
        ): cv_region_profile,
        vol.Optional(CONF_TAG_PROFILE, default=CONF_TAG_PROFILE_DEFAULT): cv_tag_profile,
    }
)

SCHEMA_SHADE = SCHEMA_HEALTH.extend(
    {
        vol.Optional(
            CONF_HEALTH_CHECK_INTERVAL,
            default=CONF_SHADE_HEALTH_CHECK_INTERVAL_DEFAULT,
        ): cv_int_choice(*HEALTH_CHECK_INTERVALS),
        vol.Optional(CONF_INVERT_COMMANDS, default=CONF_INVERT_COMMANDS_DEFAULT): cv_boolean,
        vol.Optional(CONF_INVERT_POSITION, default=CONF_INVERT_POSITION_DEFAULT): cv_boolean,
    }
)
