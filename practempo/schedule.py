"""Schedule - the interval timing state machine."""
from __future__ import annotations

import logging
import math
from typing import Iterable

from practempo.config import Settings
from practempo.ports import AudioSink, DisplaySink, TickHandle, TickSource
from practempo.types import DisplayStatus, Interval, Status

logger = logging.getLogger(__name__)

# Accumulated time is kept on a nanosecond grid so repeated fractional deltas
# (0.1 s ticks) land exactly on interval and intro boundaries.
TIME_DIGITS = 9


def _quantize(seconds: float) -> float:
    return round(seconds, TIME_DIGITS)


class Schedule:
    """Plays an ordered, immutable sequence of intervals.

    Lifecycle: ``STOPPED`` until ``prepare()``, then ``PAUSED``/``RUNNING``
    under ``start()``/``pause()``, and finally ``FINISHED``, which is terminal.
    Time arrives as variable-size deltas from the tick source, so correctness
    depends only on summed time, never on how many ticks were delivered.

    Out-of-state calls (starting a finished schedule, pausing a paused one,
    ...) are no-ops rather than errors.
    """

    def __init__(
        self,
        intervals: Iterable[Interval],
        display: DisplaySink,
        audio: AudioSink,
        ticks: TickSource,
        settings: Settings | None = None,
    ) -> None:
        self._intervals: tuple[Interval, ...] = tuple(intervals)
        self._display = display
        self._audio = audio
        self._ticks = ticks
        self._settings = settings or Settings()

        self._index: int | None = 0 if self._intervals else None
        self._elapsed = 0.0
        self._total_elapsed = 0.0
        self._total_duration = float(sum(i.duration for i in self._intervals))
        self._status = Status.STOPPED
        self._intro_fired = False
        self._handle: TickHandle | None = None
        # Bumped on every start/cancel; callbacks carrying an older value are stale.
        self._generation = 0

    # --- Queries ---

    @property
    def intervals(self) -> tuple[Interval, ...]:
        return self._intervals

    @property
    def status(self) -> Status:
        return self._status

    @property
    def current_index(self) -> int | None:
        return self._index

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def total_elapsed(self) -> float:
        return self._total_elapsed

    @property
    def total_duration(self) -> float:
        return self._total_duration

    def is_running(self) -> bool:
        return self._status is Status.RUNNING

    def is_finished(self) -> bool:
        return self._status is Status.FINISHED

    def get_current_interval(self) -> Interval | None:
        if self._index is None or self._index >= len(self._intervals):
            return None
        return self._intervals[self._index]

    def is_intro_active(self) -> bool:
        interval = self.get_current_interval()
        if interval is None or self._status is Status.FINISHED:
            return False
        return interval.is_intro_active(self._elapsed)

    def upcoming(self) -> tuple[list[Interval], bool]:
        """Return the next intervals to display and whether the end is in view."""
        if self._index is None or self._status is Status.FINISHED:
            return [], True
        total = len(self._intervals)
        stop = min(self._index + 1 + self._settings.upcoming_count, total)
        return list(self._intervals[self._index + 1:stop]), stop == total

    # --- Control ---

    def prepare(self) -> None:
        """Load the first interval and show it without starting the clock."""
        if not self._intervals:
            logger.debug("prepare ignored: schedule has no intervals")
            return
        if self._status is not Status.STOPPED:
            logger.debug(f"prepare ignored: schedule is {self._status.value}")
            return

        self._index = 0
        self._elapsed = 0.0
        self._total_elapsed = 0.0
        self._intro_fired = self._intervals[0].intro_duration == 0
        self._status = Status.PAUSED
        logger.info(
            f"prepared schedule: {len(self._intervals)} intervals, "
            f"{self._total_duration:g}s total"
        )

        self._show_current()
        self._display.show_elapsed(self._elapsed)
        self._display.show_total(self._total_elapsed, self._total_duration)
        self._display.show_status(DisplayStatus.PAUSE)

    def start(self) -> None:
        if self._status is not Status.PAUSED:
            logger.debug(f"start ignored: schedule is {self._status.value}")
            return

        self._generation += 1
        generation = self._generation
        self._handle = self._ticks.schedule(
            self._settings.tick_interval_ms,
            lambda delta: self._on_tick(generation, delta),
        )
        self._status = Status.RUNNING
        logger.debug(f"started at interval {self._index}, elapsed {self._elapsed:g}s")
        self._display.show_status(DisplayStatus.PLAY)

    def pause(self) -> None:
        if self._status is not Status.RUNNING:
            logger.debug(f"pause ignored: schedule is {self._status.value}")
            return

        self._cancel_ticks()
        self._status = Status.PAUSED
        logger.debug(f"paused at interval {self._index}, elapsed {self._elapsed:g}s")
        self._display.show_status(DisplayStatus.PAUSE)

    def skip(self) -> None:
        """Advance to the next interval immediately, keeping the play state."""
        if self._status in (Status.STOPPED, Status.FINISHED):
            logger.debug(f"skip ignored: schedule is {self._status.value}")
            return

        logger.info(f"skipping interval {self._index}")
        self._advance()
        if self._status is not Status.FINISHED:
            self._display.show_elapsed(self._elapsed)
            self._display.show_total(self._total_elapsed, self._total_duration)

    def tick(self, delta: float) -> None:
        """Apply ``delta`` seconds of running time.

        Time that overshoots the current interval carries into the next one,
        possibly across several short intervals in a single call.
        """
        if self._status is not Status.RUNNING:
            logger.debug(f"tick ignored: schedule is {self._status.value}")
            return
        if not math.isfinite(delta) or delta < 0:
            logger.warning(f"tick ignored: invalid delta {delta!r}")
            return

        carry = _quantize(delta)
        assert self._index is not None
        for _ in range(len(self._intervals) - self._index):
            interval = self._intervals[self._index]
            room = _quantize(interval.duration - self._elapsed)
            if carry < room:
                self._elapsed = _quantize(self._elapsed + carry)
                self._total_elapsed = _quantize(self._total_elapsed + carry)
                self._check_intro(interval)
                break
            self._elapsed = interval.duration
            self._total_elapsed = _quantize(self._total_elapsed + room)
            carry = _quantize(carry - room)
            self._check_intro(interval)
            self._advance()
            if self._status is not Status.RUNNING:
                break

        if self._status is Status.RUNNING:
            self._display.show_elapsed(self._elapsed)
            self._display.show_total(self._total_elapsed, self._total_duration)

    # --- Internal ---

    def _on_tick(self, generation: int, delta: float) -> None:
        if generation != self._generation or self._status is not Status.RUNNING:
            logger.debug("dropping stale tick callback")
            return
        try:
            self.tick(delta)
        except Exception:
            logger.exception(f"tick failed at interval {self._index}; pausing schedule")
            if self._status is Status.RUNNING:
                self._cancel_ticks()
                self._status = Status.PAUSED
            raise

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._ticks.cancel(self._handle)
            self._handle = None
        self._generation += 1

    def _check_intro(self, interval: Interval) -> None:
        if self._intro_fired or self._elapsed < interval.intro_duration:
            return
        self._intro_fired = True
        self._audio.play_intro_end()
        self._display.show_interval(interval.task, interval.color, False)

    def _advance(self) -> None:
        assert self._index is not None
        self._index += 1
        self._elapsed = 0.0
        if self._index >= len(self._intervals):
            self._finish()
            return

        nxt = self._intervals[self._index]
        self._intro_fired = nxt.intro_duration == 0
        logger.debug(f"advanced to interval {self._index} ({nxt.task!r})")
        self._audio.play_interval_end()
        self._show_current()

    def _finish(self) -> None:
        self._status = Status.FINISHED
        self._cancel_ticks()
        logger.info(f"schedule complete after {self._total_elapsed:g}s")
        self._audio.play_interval_end()
        self._display.clear_feature()
        self._display.show_complete()
        self._display.show_upcoming([], True)
        self._display.show_status(DisplayStatus.STOP)

    def _show_current(self) -> None:
        interval = self._intervals[self._index]
        self._display.show_interval(
            interval.task, interval.color, interval.is_intro_active(self._elapsed)
        )
        if interval.rendered is not None:
            self._display.render_feature(interval.rendered)
        else:
            self._display.clear_feature()
        upcoming, end_visible = self.upcoming()
        self._display.show_upcoming(upcoming, end_visible)
