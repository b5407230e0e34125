"""Primitive data structures."""

from __future__ import annotations

import asyncio
import functools
import typing

if typing.TYPE_CHECKING:
    from zigwire.quirks.xiaomi.regions import RegionEvent


class ReschedulableTimeout:
    """Timeout object made to be efficiently rescheduled continuously."""

    def __init__(self, callback: typing.Callable[[], None]) -> None:
        self._timer: asyncio.TimerHandle | None = None
        self._callback = callback

        self._when: float = 0

    @functools.cached_property
    def _loop(self) -> asyncio.AbstractEventLoop:
        return asyncio.get_running_loop()

    @property
    def scheduled(self) -> bool:
        return self._timer is not None

    def _timeout_trigger(self) -> None:
        now = self._loop.time()

        # If we triggered early, reschedule
        if self._when > now:
            self._reschedule()
            return

        self._timer = None
        self._callback()

    def _reschedule(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

        self._timer = self._loop.call_at(self._when, self._timeout_trigger)

    def reschedule(self, delay: float) -> None:
        self._when = self._loop.time() + delay

        # If the current timer will expire too late (or isn't running), reschedule
        if self._timer is None or self._timer.when() > self._when:
            self._reschedule()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class RegionEventBuffer:
    """Coalesces bursts of region events of one device.

    The last action seen for every region is kept until no new event arrived
    for `quiescence` seconds, then all of them are handed to `callback` at once.
    """

    def __init__(
        self,
        callback: typing.Callable[[dict[int, RegionEvent]], None],
        quiescence: float,
    ) -> None:
        self._callback = callback
        self._quiescence = quiescence
        self._events: dict[int, RegionEvent] = {}
        self._timeout = ReschedulableTimeout(self.flush)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def pending(self) -> dict[int, RegionEvent]:
        return dict(self._events)

    def push(self, event: RegionEvent) -> None:
        # Re-inserting moves the region to the end, the flush order is recency
        self._events.pop(event.region_id, None)
        self._events[event.region_id] = event
        self._timeout.reschedule(self._quiescence)

    def flush(self) -> None:
        self._timeout.cancel()

        if not self._events:
            return

        events, self._events = self._events, {}
        self._callback(events)

    def clear(self) -> None:
        self._timeout.cancel()
        self._events.clear()
