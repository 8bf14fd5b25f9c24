"""Tick sources: a deterministic virtual clock and a real monotonic clock."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from practempo.ports import TickCallback, TickHandle

NS_PER_SECOND = 1_000_000_000
NS_PER_MS = 1_000_000


@dataclass
class _Registration:
    handle: TickHandle
    period: float
    callback: TickCallback
    last: float
    due: float


def _check_interval(interval_ms: int) -> None:
    if not interval_ms > 0:
        raise ValueError("interval_ms must be positive")


def _period_seconds(interval_ms: int) -> float:
    _check_interval(interval_ms)
    return interval_ms / 1000.0


def _to_ns(seconds: float) -> int:
    return round(seconds * NS_PER_SECOND)


class VirtualTickSource:
    """Tick source driven by an explicit virtual clock.

    Nothing happens until ``advance()`` or ``fire()`` is called; callbacks run
    synchronously on the caller's stack. Multi-hour schedules run in
    microseconds and every run is reproducible. The clock counts whole
    nanoseconds, so due times never drift however many ticks are delivered.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now_ns = _to_ns(start)
        self._next_handle = 1
        self._registrations: dict[TickHandle, _Registration] = {}

    @property
    def now(self) -> float:
        return self._now_ns / NS_PER_SECOND

    def schedule(self, interval_ms: int, callback: TickCallback) -> TickHandle:
        _check_interval(interval_ms)
        period_ns = round(interval_ms * NS_PER_MS)
        handle = self._next_handle
        self._next_handle += 1
        self._registrations[handle] = _Registration(
            handle=handle,
            period=period_ns,
            callback=callback,
            last=self._now_ns,
            due=self._now_ns + period_ns,
        )
        return handle

    def cancel(self, handle: TickHandle) -> None:
        self._registrations.pop(handle, None)

    def active(self) -> list[TickHandle]:
        return list(self._registrations)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, delivering every callback that falls due.

        Callbacks fire in due-time order (ties broken by registration order),
        each receiving the time since its previous delivery.
        """
        if not seconds >= 0:
            raise ValueError(f"cannot advance by {seconds!r}")
        target = self._now_ns + _to_ns(seconds)
        while True:
            due = [r for r in self._registrations.values() if r.due <= target]
            if not due:
                break
            reg = min(due, key=lambda r: (r.due, r.handle))
            self._now_ns = reg.due
            delta = (reg.due - reg.last) / NS_PER_SECOND
            reg.last = reg.due
            reg.due += reg.period
            reg.callback(delta)
        self._now_ns = target

    def fire(self, delta: float) -> None:
        """Deliver one irregular ``delta`` to every live callback.

        The virtual clock does not move; this models a host that coalesces or
        delays wake-ups.
        """
        for handle in list(self._registrations):
            reg = self._registrations.get(handle)
            if reg is not None:
                reg.callback(delta)


class MonotonicTickSource:
    """Tick source backed by a real monotonic clock.

    The host loop calls ``pump()`` as often as it likes (e.g. once per frame);
    each due callback receives the real time since its previous delivery, so a
    late pump produces one larger delta instead of lost time.
    """

    def __init__(
        self,
        now: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._now = now
        self._sleep = sleep
        self._next_handle = 1
        self._registrations: dict[TickHandle, _Registration] = {}

    def schedule(self, interval_ms: int, callback: TickCallback) -> TickHandle:
        period = _period_seconds(interval_ms)
        handle = self._next_handle
        self._next_handle += 1
        t = self._now()
        self._registrations[handle] = _Registration(
            handle=handle, period=period, callback=callback, last=t, due=t + period
        )
        return handle

    def cancel(self, handle: TickHandle) -> None:
        self._registrations.pop(handle, None)

    def active(self) -> list[TickHandle]:
        return list(self._registrations)

    def pump(self) -> int:
        """Deliver every due callback once. Returns how many fired."""
        t = self._now()
        fired = 0
        for handle in sorted(self._registrations):
            reg = self._registrations.get(handle)
            # A callback earlier in this pass may have cancelled this one.
            if reg is None or reg.due > t:
                continue
            delta = t - reg.last
            reg.last = t
            reg.due = t + reg.period
            fired += 1
            reg.callback(delta)
        return fired

    def run(self, until: Callable[[], bool], idle: float = 0.05) -> None:
        """Pump until ``until()`` is true, sleeping between due times."""
        while not until():
            self.pump()
            if until():
                break
            if self._registrations:
                next_due = min(r.due for r in self._registrations.values())
                wait = next_due - self._now()
            else:
                wait = idle
            if wait > 0:
                self._sleep(wait)
