"""Device liveness tracking.

A device is `online` as soon as any message arrives from it. Sending a command
that expects a reply arms a timeout; when it expires before the next inbound
message the device is marked `offline`.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import enum
import logging
import random
import typing

from zigwire.const import COMMAND_TIMEOUT, HEALTH_CHECK_INTERVALS
from zigwire.datastructures import ReschedulableTimeout
from zigwire.exceptions import LivenessTimeout
import zigwire.util

LOGGER = logging.getLogger(__name__)

# Probes start at a random minute and second inside this window
PROBE_MINUTE_JITTER = 9
PROBE_SECOND_JITTER = 59


class HealthState(str, enum.Enum):
    unknown = "unknown"
    online = "online"
    offline = "offline"


class HealthStateMachine(zigwire.util.LocalLogMixin, zigwire.util.ListenableMixin):
    """Tracks the health of one device.

    Listeners receive ``health_status_updated(state, error)`` on every state
    change, `error` is a `LivenessTimeout` when a command went unanswered.
    """

    def __init__(
        self,
        device_id: str,
        *,
        command_timeout: float = COMMAND_TIMEOUT,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self.device_id = device_id
        self.command_timeout = command_timeout
        self.state = HealthState.unknown

        self._last_seen: datetime | None = None
        self._rng = rng if rng is not None else random.Random()
        self._timeout = ReschedulableTimeout(self._command_timed_out)

        self._probe: typing.Callable[[], typing.Any] | None = None
        self._probe_handle: asyncio.TimerHandle | None = None
        self._probe_interval: int = 0
        self.probe_offset: float | None = None

    def log(self, lvl: int, msg: str, *args, **kwargs) -> None:
        msg = "[%s] " + msg
        args = (self.device_id,) + args
        LOGGER.log(lvl, msg, *args, **kwargs)

    @property
    def last_seen(self) -> float | None:
        return self._last_seen.timestamp() if self._last_seen is not None else None

    @property
    def timeout_pending(self) -> bool:
        return self._timeout.scheduled

    @property
    def probe_scheduled(self) -> bool:
        return self._probe_handle is not None

    def _set_state(self, state: HealthState, error: Exception | None = None) -> None:
        if state == self.state:
            return

        self.info("healthStatus was set to %s", state.value)
        self.state = state
        self.listener_event("health_status_updated", state, error)

    def install(self) -> None:
        self.info("installed")
        self.state = HealthState.unknown
        self.listener_event("health_status_updated", self.state, None)

    def reset(self) -> None:
        """Forget the device state, the next message brings it back online.

        A scheduled ping keeps running.
        """
        self._timeout.cancel()
        self._last_seen = None
        self._set_state(HealthState.unknown)

    def remove(self) -> None:
        self._timeout.cancel()
        self._cancel_probe()
        self._probe = None

    def frame_received(self) -> None:
        """Any inbound message counts as proof of life, even an unparseable one."""
        self._last_seen = datetime.now(timezone.utc)
        self._timeout.cancel()
        self._set_state(HealthState.online)

    def command_sent(self, timeout: float | None = None) -> None:
        """Arm the reply timeout, superseding any earlier one."""
        if timeout is None:
            timeout = self.command_timeout

        self._timeout.cancel()
        self._timeout.reschedule(timeout)

    def _command_timed_out(self) -> None:
        if self.state == HealthState.offline:
            return

        self.warning("no response received (device offline?)")
        error = LivenessTimeout(
            f"No response within {self.command_timeout}s",
            device_id=self.device_id,
            timeout=self.command_timeout,
        )
        self._set_state(HealthState.offline, error)

    def schedule_probe(
        self, interval: int, probe: typing.Callable[[], typing.Any]
    ) -> None:
        """Run `probe` every `interval` minutes, starting at a random offset.

        An interval of zero disables probing.
        """
        if interval not in HEALTH_CHECK_INTERVALS:
            raise ValueError(
                f"Health check interval must be one of {HEALTH_CHECK_INTERVALS}: {interval}"
            )

        self._cancel_probe()
        self._probe = probe
        self._probe_interval = interval

        if not interval:
            self.probe_offset = None
            return

        self.probe_offset = (
            self._rng.randrange(PROBE_MINUTE_JITTER) * 60
            + self._rng.randrange(PROBE_SECOND_JITTER)
        )

        self.info("scheduling health check every %d minutes", interval)
        self._probe_handle = asyncio.get_running_loop().call_later(
            self.probe_offset, self._probe_fired
        )

    def _cancel_probe(self) -> None:
        if self._probe_handle is not None:
            self._probe_handle.cancel()
            self._probe_handle = None

    def _probe_fired(self) -> None:
        self._probe_handle = asyncio.get_running_loop().call_later(
            self._probe_interval * 60, self._probe_fired
        )

        self.debug("ping...")
        self.command_sent()

        if self._probe is not None:
            self._probe()
