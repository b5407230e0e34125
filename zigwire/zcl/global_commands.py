from __future__ import annotations

import dataclasses
import logging
import typing

from zigwire.const import cluster_lookup
from zigwire.exceptions import ProtocolStatusError
from zigwire.zcl import foundation

if typing.TYPE_CHECKING:
    from zigwire.zcl.frame import ZclFrame

LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class GlobalCommandResult:
    """Outcome of interpreting one global command frame."""

    command_id: int
    handled: bool
    status: foundation.Status | None = None
    echoed_command_id: int | None = None
    error: ProtocolStatusError | None = None

    @property
    def success(self) -> bool:
        return self.handled and self.error is None


class GlobalCommandInterpreter:
    """Classifies ZCL foundation responses.

    Never raises. A malformed response comes back unhandled.
    """

    def __init__(
        self, trace_sink: typing.Callable[[ZclFrame], None] | None = None
    ) -> None:
        self._trace_sink = trace_sink
        self._handlers: dict[
            foundation.GeneralCommand,
            typing.Callable[[ZclFrame], GlobalCommandResult],
        ] = {
            foundation.GeneralCommand.Write_Attributes_rsp: self._write_attributes_rsp,
            foundation.GeneralCommand.Configure_Reporting_rsp: self._configure_reporting_rsp,
            foundation.GeneralCommand.Default_Response: self._default_response,
        }

    @property
    def handled_commands(self) -> frozenset[foundation.GeneralCommand]:
        return frozenset(self._handlers)

    def interpret(self, frame: ZclFrame) -> GlobalCommandResult:
        handler = self._handlers.get(frame.command_id)

        if handler is None:
            return self._unhandled(frame)

        return handler(frame)

    def _unhandled(self, frame: ZclFrame) -> GlobalCommandResult:
        if self._trace_sink is not None:
            self._trace_sink(frame)
        else:
            LOGGER.debug(
                "Ignoring global command 0x%02X for %s: %r",
                frame.command_id,
                cluster_lookup(frame.cluster_id),
                frame,
            )

        return GlobalCommandResult(command_id=frame.command_id, handled=False)

    def _write_attributes_rsp(self, frame: ZclFrame) -> GlobalCommandResult:
        # A single scalar status may arrive as the attribute value instead
        payload = frame.data or frame.value

        if not payload:
            LOGGER.warning("Write attributes response without status: %r", frame)
            return GlobalCommandResult(command_id=frame.command_id, handled=False)

        status = foundation.Status(payload[0])
        error = None

        if status == foundation.Status.SUCCESS:
            LOGGER.debug(
                "Write %s attribute response: 0x%02X",
                cluster_lookup(frame.cluster_id),
                status,
            )
        else:
            LOGGER.warning(
                "Write %s attribute error: 0x%02X (%s)",
                cluster_lookup(frame.cluster_id),
                status,
                status.name,
            )
            error = ProtocolStatusError(
                f"Write attributes failed with status {status.name}",
                cluster_id=frame.cluster_id,
                command_id=foundation.GeneralCommand.Write_Attributes,
                status=status,
            )

        return GlobalCommandResult(
            command_id=frame.command_id, handled=True, status=status, error=error
        )

    def _configure_reporting_rsp(self, frame: ZclFrame) -> GlobalCommandResult:
        LOGGER.info("Reporting for %s enabled successfully", cluster_lookup(frame.cluster_id))

        return GlobalCommandResult(
            command_id=frame.command_id,
            handled=True,
            status=foundation.Status.SUCCESS,
        )

    def _default_response(self, frame: ZclFrame) -> GlobalCommandResult:
        if len(frame.data) < 2:
            LOGGER.warning("Default response is too short: %r", frame)
            return GlobalCommandResult(command_id=frame.command_id, handled=False)

        echoed_command_id = frame.data[0]
        status = foundation.Status(frame.data[1])
        error = None

        if status == foundation.Status.SUCCESS:
            LOGGER.debug(
                "Command status %s command 0x%02X: 0x%02X",
                cluster_lookup(frame.cluster_id),
                echoed_command_id,
                status,
            )
        else:
            LOGGER.warning(
                "Command error (%s, command: 0x%02X) 0x%02X (%s)",
                cluster_lookup(frame.cluster_id),
                echoed_command_id,
                status,
                status.name,
            )
            error = ProtocolStatusError(
                f"Command 0x{echoed_command_id:02X} failed with status {status.name}",
                cluster_id=frame.cluster_id,
                command_id=echoed_command_id,
                status=status,
            )

        return GlobalCommandResult(
            command_id=frame.command_id,
            handled=True,
            status=status,
            echoed_command_id=echoed_command_id,
            error=error,
        )
