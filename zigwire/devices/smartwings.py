"""Smartwings motorized window shade (WM25/L-Z)."""

from __future__ import annotations

from zigwire.commands import (
    ClusterCommand,
    ConfigureReporting,
    Delay,
    Instruction,
    ReadAttributes,
    with_delay,
)
from zigwire.config import CONF_INVERT_COMMANDS, CONF_INVERT_POSITION, SCHEMA_SHADE
from zigwire.const import (
    BASIC_CLUSTER,
    BATTERY_PERCENT_REMAINING_ATTR_ID,
    CLOSE_CMD_ID,
    FIRMWARE_VERSION_ATTR_ID,
    GOTO_POSITION_CMD_ID,
    LIFT_PERCENT_ATTR_ID,
    OPEN_CMD_ID,
    PING_ATTR_ID,
    POWER_CONFIGURATION_CLUSTER,
    STOP_CMD_ID,
    WINDOW_COVERING_CLUSTER,
)
from zigwire.device import AttributeHandler, Device
import zigwire.types as t
from zigwire.zcl import ZclFrame
from zigwire.zcl.foundation import DataType

# Milliseconds between configuring reporting and reading the current state
CONFIGURE_REFRESH_DELAY_MS = 2000

BATTERY_UNKNOWN = 0xFF


def _clamp_percent(value: int) -> int:
    return min(100, max(0, value))


class WindowCoveringShade(Device):
    schema = SCHEMA_SHADE

    installed_attributes = {
        **Device.installed_attributes,
        "windowShade": "unknown",
    }

    def attribute_handlers(self) -> dict[int, dict[int, AttributeHandler]]:
        return {
            BASIC_CLUSTER: {
                PING_ATTR_ID: self._handle_pong,
                FIRMWARE_VERSION_ATTR_ID: self._handle_firmware_version,
            },
            POWER_CONFIGURATION_CLUSTER: {
                BATTERY_PERCENT_REMAINING_ATTR_ID: self._handle_battery_percent,
            },
            WINDOW_COVERING_CLUSTER: {
                LIFT_PERCENT_ATTR_ID: self._handle_lift_percent,
            },
        }

    def _command(self, command_id: int, payload: bytes = b"") -> list[Instruction]:
        self.health.command_sent()
        return [ClusterCommand(WINDOW_COVERING_CLUSTER, command_id, payload)]

    def open(self) -> list[Instruction]:
        self.info("open...")
        self.update_attribute("windowShade", "opening")
        inverted = self.config[CONF_INVERT_COMMANDS]
        return self._command(CLOSE_CMD_ID if inverted else OPEN_CMD_ID)

    def close(self) -> list[Instruction]:
        self.info("close...")
        self.update_attribute("windowShade", "closing")
        inverted = self.config[CONF_INVERT_COMMANDS]
        return self._command(OPEN_CMD_ID if inverted else CLOSE_CMD_ID)

    def stop(self) -> list[Instruction]:
        self.info("stopPositionChange...")
        return self._command(STOP_CMD_ID)

    stop_position_change = stop

    def set_position(self, value: int | str) -> list[Instruction]:
        self.info("setPosition(%s)", value)
        position = _clamp_percent(int(value))

        if self.config[CONF_INVERT_POSITION]:
            position = 100 - position

        self.update_attribute("windowShade", "partially open")
        return self._command(GOTO_POSITION_CMD_ID, t.uint8_t(position).serialize())

    def start_position_change(self, direction: str) -> list[Instruction]:
        self.info("startPositionChange(%s)", direction)

        if direction == "open":
            return self.open()
        elif direction == "close":
            return self.close()

        raise ValueError(f"Unknown direction {direction!r}")

    def refresh(self) -> list[Instruction]:
        self.info("refresh")
        cmds: list[Instruction] = []

        cmds += with_delay(
            ReadAttributes(BASIC_CLUSTER, (FIRMWARE_VERSION_ATTR_ID,)), self.delay_ms
        )
        cmds += with_delay(
            ReadAttributes(
                POWER_CONFIGURATION_CLUSTER, (BATTERY_PERCENT_REMAINING_ATTR_ID,)
            ),
            self.delay_ms,
        )
        cmds += [ReadAttributes(WINDOW_COVERING_CLUSTER, (LIFT_PERCENT_ATTR_ID,))]

        self.health.command_sent()
        return cmds

    def configure(self) -> list[Instruction]:
        self.info("configure...")
        cmds: list[Instruction] = [
            ConfigureReporting(
                WINDOW_COVERING_CLUSTER,
                LIFT_PERCENT_ATTR_ID,
                DataType.uint8,
                min_interval=1,
                max_interval=3600,
                reportable_change=1,
            ),
            ConfigureReporting(
                POWER_CONFIGURATION_CLUSTER,
                BATTERY_PERCENT_REMAINING_ATTR_ID,
                DataType.uint8,
                min_interval=30,
                max_interval=21600,
                reportable_change=2,
            ),
            Delay(CONFIGURE_REFRESH_DELAY_MS),
        ]

        cmds += self.refresh()
        self.debug("zigbee configure cmds: %s", cmds)
        return cmds

    def _handle_firmware_version(self, frame: ZclFrame) -> None:
        version = frame.value_text or "unknown"
        self.info("device firmware version is %s", version)
        self.update_data("softwareBuild", version)

    def _handle_battery_percent(self, frame: ZclFrame) -> None:
        value = frame.value_int

        if value < BATTERY_UNKNOWN:
            self.update_attribute("battery", _clamp_percent(value), "%")

    def _handle_lift_percent(self, frame: ZclFrame) -> None:
        position = _clamp_percent(frame.value_int)

        if position == 0:
            self.update_attribute("windowShade", "open")
        elif position == 100:
            self.update_attribute("windowShade", "closed")
        else:
            self.update_attribute("windowShade", "partially open")

        if self.config[CONF_INVERT_POSITION]:
            position = 100 - position

        self.update_attribute("position", position, "%")
