"""Aqara FP1 human presence sensor (lumi.motion.ac01).

The sensor needs about six seconds to detect presence and decides within
thirty seconds that nobody is there anymore. Detection regions, interference,
exit/entrance and edge grids are programmed through the Xiaomi cluster.
"""

from __future__ import annotations

import asyncio
import typing

from zigwire.commands import Instruction, ReadAttributes, WriteAttributes, with_delay
from zigwire.config import (
    APPROACH_DISTANCES,
    CONF_APPROACH_DISTANCE,
    CONF_DETECTION_REGIONS,
    CONF_DIRECTION_MODE,
    CONF_EDGES_REGION,
    CONF_EXIT_ENTRANCES_REGION,
    CONF_INTERFERENCE_REGION,
    CONF_PRESENCE_RESET_INTERVAL,
    CONF_REGION_EVENT_QUIESCENCE,
    CONF_REGION_PROFILE,
    CONF_SENSITIVITY_LEVEL,
    CONF_TAG_PROFILE,
    DIRECTION_MODES,
    SCHEMA_FP1,
    SENSITIVITY_LEVELS,
)
from zigwire.const import (
    BASIC_CLUSTER,
    DIRECTION_MODE_ATTR_ID,
    PING_ATTR_ID,
    PRESENCE_ACTIONS_ATTR_ID,
    PRESENCE_ATTR_ID,
    REGION_EVENT_ATTR_ID,
    RESET_PRESENCE_ATTR_ID,
    SENSITIVITY_LEVEL_ATTR_ID,
    SET_EDGE_REGION_ATTR_ID,
    SET_EXIT_REGION_ATTR_ID,
    SET_INTERFERENCE_ATTR_ID,
    SET_REGION_ATTR_ID,
    TRIGGER_DISTANCE_ATTR_ID,
    XIAOMI_CLUSTER,
    XIAOMI_MFG_CODE,
    XIAOMI_TAGS_ATTR_ID,
)
from zigwire.datastructures import RegionEventBuffer
from zigwire.device import AttributeHandler, Device
from zigwire.exceptions import ValidationError
from zigwire.quirks.xiaomi.regions import (
    MAX_REGION_ID,
    MIN_REGION_ID,
    ROW_COUNT,
    DetectionRegion,
    RegionCodec,
    RegionEvent,
)
from zigwire.quirks.xiaomi.tags import FP1_TAGS, XiaomiTagDecoder
import zigwire.types as t
from zigwire.zcl import ZclFrame
from zigwire.zcl.foundation import DataType

if typing.TYPE_CHECKING:
    import random


class PresenceAction(t.enum8):
    enter = 0x00
    leave = 0x01
    enter_left = 0x02
    leave_right = 0x03
    enter_right = 0x04
    leave_left = 0x05
    towards = 0x06
    away = 0x07


PRESENCE_ACTION_LABELS = {
    PresenceAction.enter: "enter",
    PresenceAction.leave: "leave",
    PresenceAction.enter_left: "enter (left)",
    PresenceAction.leave_right: "leave (right)",
    PresenceAction.enter_right: "enter (right)",
    PresenceAction.leave_left: "leave (left)",
    PresenceAction.towards: "towards",
    PresenceAction.away: "away",
}

MOTION_ACTIONS = frozenset(
    {
        PresenceAction.enter,
        PresenceAction.enter_left,
        PresenceAction.enter_right,
        PresenceAction.towards,
        PresenceAction.away,
    }
)

REGION_MASK_ATTRIBUTES = {
    CONF_INTERFERENCE_REGION: SET_INTERFERENCE_ATTR_ID,
    CONF_EXIT_ENTRANCES_REGION: SET_EXIT_REGION_ATTR_ID,
    CONF_EDGES_REGION: SET_EDGE_REGION_ATTR_ID,
}

EMPTY_GRID = (0,) * ROW_COUNT


class PresenceSensorFP1(Device):
    schema = SCHEMA_FP1

    installed_attributes = {
        **Device.installed_attributes,
        "activity": PRESENCE_ACTION_LABELS[PresenceAction.leave],
        "motion": "inactive",
        "presence": "not present",
    }

    def __init__(
        self,
        device_id: str,
        config: dict[str, typing.Any] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(device_id, config, rng=rng)
        self.region_codec = RegionCodec(self.config[CONF_REGION_PROFILE])
        self.tag_decoder = XiaomiTagDecoder(self.config[CONF_TAG_PROFILE])
        self.region_events = RegionEventBuffer(
            self._region_events_flushed,
            quiescence=self.config[CONF_REGION_EVENT_QUIESCENCE],
        )
        self._presence_watchdog: asyncio.TimerHandle | None = None

    def attribute_handlers(self) -> dict[int, dict[int, AttributeHandler]]:
        return {
            BASIC_CLUSTER: {PING_ATTR_ID: self._handle_pong},
            XIAOMI_CLUSTER: {
                PRESENCE_ATTR_ID: self._handle_presence,
                PRESENCE_ACTIONS_ATTR_ID: self._handle_presence_action,
                REGION_EVENT_ATTR_ID: self._handle_region_event,
                SENSITIVITY_LEVEL_ATTR_ID: self._handle_sensitivity_level,
                TRIGGER_DISTANCE_ATTR_ID: self._handle_approach_distance,
                DIRECTION_MODE_ATTR_ID: self._handle_direction_mode,
                XIAOMI_TAGS_ATTR_ID: self._handle_tags,
            },
        }

    def remove(self) -> None:
        super().remove()
        self.region_events.clear()
        self._cancel_presence_watchdog()

    def _write(
        self, attribute_id: int, data_type: DataType, value: int | bytes, delay_ms: int
    ) -> list[Instruction]:
        return with_delay(
            WriteAttributes(
                XIAOMI_CLUSTER,
                attribute_id,
                data_type,
                value,
                manufacturer=XIAOMI_MFG_CODE,
            ),
            delay_ms,
        )

    def configure(self) -> list[Instruction]:
        self.info("configure...")
        cmds: list[Instruction] = []

        sensitivity = self.config[CONF_SENSITIVITY_LEVEL]
        if sensitivity is not None:
            self.info("setting sensitivity level to %s", SENSITIVITY_LEVELS[sensitivity])
            cmds += self._write(
                SENSITIVITY_LEVEL_ATTR_ID, DataType.uint8, sensitivity, self.delay_ms
            )

        approach = self.config[CONF_APPROACH_DISTANCE]
        if approach is not None:
            self.info("setting approach distance to %s", APPROACH_DISTANCES[approach])
            cmds += self._write(
                TRIGGER_DISTANCE_ATTR_ID, DataType.uint8, approach, self.delay_ms
            )

        direction = self.config[CONF_DIRECTION_MODE]
        if direction is not None:
            self.info("setting direction mode to %s", DIRECTION_MODES[direction])
            cmds += self._write(
                DIRECTION_MODE_ATTR_ID, DataType.uint8, direction, self.delay_ms
            )

        regions = self.config[CONF_DETECTION_REGIONS]
        for region_id in range(MIN_REGION_ID, MAX_REGION_ID + 1):
            rows = regions.get(region_id)

            if rows:
                self.info("setting detection region %d value to %s", region_id, rows)
                cmds += self.set_region(region_id, *rows)
            else:
                self.info("removing detection region %d", region_id)
                cmds += self.remove_region(region_id)

        for key, attribute_id in REGION_MASK_ATTRIBUTES.items():
            rows = self.config[key] or EMPTY_GRID
            self.info("setting %s value to %s", key, rows)
            cmds += self._write(
                attribute_id,
                DataType.uint32,
                self.region_codec.encode_mask(rows),
                self.delay_ms,
            )

        cmds += with_delay(
            ReadAttributes(
                XIAOMI_CLUSTER,
                (
                    SENSITIVITY_LEVEL_ATTR_ID,
                    TRIGGER_DISTANCE_ATTR_ID,
                    DIRECTION_MODE_ATTR_ID,
                ),
                manufacturer=XIAOMI_MFG_CODE,
            ),
            self.delay_ms,
        )

        self.debug("zigbee configure cmds: %s", cmds)
        self.health.command_sent()
        return cmds

    def set_region(self, region_id: int, *values: int) -> list[Instruction]:
        """Program a detection region.

        `values` is either a ``top, bottom, left, right`` box or seven row values.
        Invalid coordinates produce no instructions.
        """
        try:
            if len(values) == 4:
                region = DetectionRegion.from_box(region_id, *values)
            else:
                region = DetectionRegion.from_grid(region_id, values)
        except ValidationError as exc:
            self.error("%s", exc)
            return []

        payload = self.region_codec.encode_region(region)
        return self._write(SET_REGION_ATTR_ID, DataType.octstr, payload, self.delay_ms)

    def remove_region(self, region_id: int) -> list[Instruction]:
        try:
            payload = self.region_codec.clear_payload(region_id)
        except ValidationError as exc:
            self.error("%s", exc)
            return []

        return self._write(SET_REGION_ATTR_ID, DataType.octstr, payload, self.delay_ms)

    def reset_presence(self) -> list[Instruction]:
        self.info("reset presence")
        self._cancel_presence_watchdog()
        self.region_events.clear()

        self.update_attribute("motion", "inactive")
        self.update_attribute("presence", "not present")
        self.update_attribute("activity", PRESENCE_ACTION_LABELS[PresenceAction.leave])
        self.delete_attribute("regionNumber")
        self.delete_attribute("regionAction")

        return self._write(RESET_PRESENCE_ATTR_ID, DataType.uint8, 0x01, 0)

    def _cancel_presence_watchdog(self) -> None:
        if self._presence_watchdog is not None:
            self._presence_watchdog.cancel()
            self._presence_watchdog = None

    def _presence_watchdog_expired(self) -> None:
        self._presence_watchdog = None
        self.warning("presence did not clear, resetting")
        self.listener_event("device_commands_ready", self.reset_presence())

    def _update_presence(self, value: int) -> None:
        self.update_attribute("presence", "present" if value else "not present")

        hours = self.config[CONF_PRESENCE_RESET_INTERVAL]
        if not hours:
            return

        self._cancel_presence_watchdog()

        if value:
            self._presence_watchdog = asyncio.get_running_loop().call_later(
                hours * 3600, self._presence_watchdog_expired
            )

    def _update_presence_action(self, value: int) -> None:
        if value not in PRESENCE_ACTION_LABELS:
            self.warning("unknown presence value %s", value)
            return

        action = PresenceAction(value)
        self.update_attribute("activity", PRESENCE_ACTION_LABELS[action])
        self.update_attribute("motion", "active" if action in MOTION_ACTIONS else "inactive")

    def _handle_presence(self, frame: ZclFrame) -> None:
        self.debug("xiaomi: presence attribute is %s", frame.value_int)
        self._update_presence(frame.value_int)

    def _handle_presence_action(self, frame: ZclFrame) -> None:
        self.debug("xiaomi: action attribute is %s", frame.value_int)
        self._update_presence_action(frame.value_int)

    def _handle_region_event(self, frame: ZclFrame) -> None:
        event = self.region_codec.decode_event(frame.value)
        self.debug("xiaomi: region %d action is %d", event.region_id, event.raw_action)
        self.region_events.push(event)

    def _region_events_flushed(self, events: dict[int, RegionEvent]) -> None:
        *_, latest = events.values()

        self.update_attribute("regionNumber", latest.region_id)
        if latest.action is not None:
            self.update_attribute("regionAction", latest.action.name)

        self.listener_event("region_activity_updated", events)

    def _handle_sensitivity_level(self, frame: ZclFrame) -> None:
        value = frame.value_int
        self.info(
            "sensitivity level is '%s' (0x%02X)", SENSITIVITY_LEVELS.get(value), value
        )
        self.update_setting(CONF_SENSITIVITY_LEVEL, value)

    def _handle_approach_distance(self, frame: ZclFrame) -> None:
        value = frame.value_int
        self.info(
            "approach distance is '%s' (0x%02X)", APPROACH_DISTANCES.get(value), value
        )
        self.update_setting(CONF_APPROACH_DISTANCE, value)

    def _handle_direction_mode(self, frame: ZclFrame) -> None:
        value = frame.value_int
        self.info(
            "monitoring direction mode is '%s' (0x%02X)", DIRECTION_MODES.get(value), value
        )
        self.update_setting(CONF_DIRECTION_MODE, value)

    def _handle_tags(self, frame: ZclFrame) -> None:
        tags = self.tag_decoder.decode(frame.value)
        named = XiaomiTagDecoder.name_tags(tags, FP1_TAGS)

        for name, value in named.items():
            if not isinstance(value, int):
                self.debug("ignoring non numeric tag %s: %r", name, value)
                continue

            if name == "software_build":
                self.update_data("softwareBuild", f"{value & 0xFF:04d}")
            elif name == "presence":
                self._update_presence(value)
            elif name == "presence_action":
                self._update_presence_action(value)
            elif name == "direction_mode":
                self.update_setting(CONF_DIRECTION_MODE, value)
            elif name == "trigger_distance":
                self.update_setting(CONF_APPROACH_DISTANCE, value)
