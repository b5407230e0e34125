from __future__ import annotations

import logging
import typing

import voluptuous as vol

from zigwire.commands import Instruction, ReadAttributes
from zigwire.config import (
    CONF_COMMAND_TIMEOUT,
    CONF_DELAY_MS,
    CONF_HEALTH_CHECK_INTERVAL,
    SCHEMA_HEALTH,
)
from zigwire.const import BASIC_CLUSTER, PING_ATTR_ID, cluster_lookup
from zigwire.exceptions import ParsingError
from zigwire.health import HealthState, HealthStateMachine
import zigwire.util
from zigwire.zcl import FrameCodec, GlobalCommandInterpreter, ZclFrame
from zigwire.zcl.global_commands import GlobalCommandResult

if typing.TYPE_CHECKING:
    import random

LOGGER = logging.getLogger(__name__)

AttributeHandler = typing.Callable[[ZclFrame], None]


class Device(zigwire.util.LocalLogMixin, zigwire.util.ListenableMixin):
    """Base of the device drivers.

    A driver turns inbound message descriptions into attribute updates and
    turns commands into lists of outbound instructions. Listeners receive
    ``device_attribute_updated``, ``device_setting_updated``,
    ``device_data_updated``, ``device_commands_ready``,
    ``device_protocol_error`` and ``health_status_updated`` events.
    """

    schema: vol.Schema = SCHEMA_HEALTH

    # Attribute values populated when the device is installed
    installed_attributes: dict[str, typing.Any] = {
        "healthStatus": HealthState.unknown.value
    }

    def __init__(
        self,
        device_id: str,
        config: dict[str, typing.Any] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self.device_id = device_id
        self.config = self.schema(config or {})

        self.attributes: dict[str, typing.Any] = {}
        self.settings: dict[str, typing.Any] = {}
        self.data: dict[str, typing.Any] = {}

        self.health = HealthStateMachine(
            device_id, command_timeout=self.config[CONF_COMMAND_TIMEOUT], rng=rng
        )
        self.health.add_listener(self)

        self._global_commands = GlobalCommandInterpreter(trace_sink=self._trace_global)
        self._handlers = self.attribute_handlers()

    def log(self, lvl: int, msg: str, *args, **kwargs) -> None:
        msg = "[%s] " + msg
        args = (self.device_id,) + args
        LOGGER.log(lvl, msg, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} device_id={self.device_id!r}>"

    @property
    def delay_ms(self) -> int:
        return self.config[CONF_DELAY_MS]

    def attribute_handlers(self) -> dict[int, dict[int, AttributeHandler]]:
        """Cluster id to attribute id to handler."""
        return {BASIC_CLUSTER: {PING_ATTR_ID: self._handle_pong}}

    @property
    def handled_clusters(self) -> frozenset[int]:
        return frozenset(self._handlers)

    def install(self) -> None:
        self.health.install()

        for name, value in self.installed_attributes.items():
            self.update_attribute(name, value)

    def updated(self) -> list[Instruction]:
        """Apply the configuration: reschedule health checks and configure."""
        self.info("updated...")
        interval = self.config[CONF_HEALTH_CHECK_INTERVAL]
        self.health.schedule_probe(interval, self._health_probe)

        return self.configure()

    def remove(self) -> None:
        self.health.remove()

    def configure(self) -> list[Instruction]:
        return []

    def ping(self) -> list[Instruction]:
        self.info("ping...")
        self.health.command_sent()

        # Attribute 0x0001 of the Basic cluster is used as a simple ping/pong
        return [ReadAttributes(BASIC_CLUSTER, (PING_ATTR_ID,))]

    def _health_probe(self) -> None:
        self.listener_event("device_commands_ready", self.ping())

    def health_status_updated(
        self, state: HealthState, error: Exception | None
    ) -> None:
        self.update_attribute("healthStatus", state.value)
        self.listener_event("health_status_updated", state, error)

    def update_attribute(
        self, name: str, value: typing.Any, unit: str | None = None
    ) -> None:
        if self.attributes.get(name) != value:
            self.info("%s was set to %s%s", name, value, unit or "")

        self.attributes[name] = value
        self.listener_event("device_attribute_updated", name, value)

    def delete_attribute(self, name: str) -> None:
        if self.attributes.pop(name, None) is not None:
            self.listener_event("device_attribute_updated", name, None)

    def update_setting(self, name: str, value: typing.Any) -> None:
        self.settings[name] = value
        self.listener_event("device_setting_updated", name, value)

    def update_data(self, name: str, value: typing.Any) -> None:
        self.data[name] = value
        self.listener_event("device_data_updated", name, value)

    def parse(self, description: str) -> ZclFrame | None:
        """Handle one inbound message description."""

        # Even a message we cannot parse proves the device is alive
        self.health.frame_received()

        try:
            frame = FrameCodec.parse(description)
        except ParsingError as exc:
            self.warning("Failed to parse message %r: %s", description, exc)
            return None

        try:
            self.handle_frame(frame)
        except ParsingError as exc:
            self.warning("Failed to decode %r: %s", frame, exc)

        return frame

    def handle_frame(self, frame: ZclFrame) -> None:
        if frame.is_global and not frame.is_attribute_report:
            self._handle_global_command(frame)
            return

        handlers = self._handlers.get(frame.cluster_id)

        if handlers is None:
            self.debug("received unknown message cluster: %r", frame)
            return

        if not frame.has_attribute:
            self._dispatch(handlers, frame)
            return

        for record in frame.attributes:
            self._dispatch(handlers, frame.with_attribute(record))

    def _dispatch(
        self, handlers: dict[int, AttributeHandler], frame: ZclFrame
    ) -> None:
        handler = handlers.get(frame.attribute_id)

        if handler is None:
            self.warning(
                "received unknown %s attribute %s (value %s)",
                cluster_lookup(frame.cluster_id),
                "None" if frame.attribute_id is None else f"0x{frame.attribute_id:04X}",
                frame.value.hex().upper(),
            )
            return

        self.debug(
            "received %s attribute 0x%04X (value %s)",
            cluster_lookup(frame.cluster_id),
            frame.attribute_id,
            frame.value.hex().upper(),
        )
        handler(frame)

    def _handle_global_command(self, frame: ZclFrame) -> GlobalCommandResult:
        result = self._global_commands.interpret(frame)

        # A failed write or command leaves the health state alone
        if result.error is not None:
            self.listener_event("device_protocol_error", result.error)

        return result

    def _trace_global(self, frame: ZclFrame) -> None:
        self.debug("received global command message %r", frame)

    def _handle_pong(self, frame: ZclFrame) -> None:
        self.info("pong..")
