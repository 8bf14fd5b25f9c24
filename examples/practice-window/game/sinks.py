"""Display and audio sinks that feed the pygame window."""
from __future__ import annotations

import logging
from array import array
from typing import Any, Callable, Sequence

import pygame

from practempo import DisplayStatus, Interval

from ui.constants import FLASH_MS, INTERVAL_END_BEEP, INTRO_END_BEEP, SAMPLE_RATE

logger = logging.getLogger(__name__)


class WindowDisplay:
    """Keeps the latest display state; the render loop draws from it."""

    def __init__(self, now_ms: Callable[[], int] = pygame.time.get_ticks) -> None:
        self._now_ms = now_ms
        self.reset()

    def reset(self) -> None:
        self.task = ""
        self.color = ""
        self.intro_active = False
        self.elapsed = 0.0
        self.total_elapsed = 0.0
        self.total_duration = 0.0
        self.upcoming: list[Interval] = []
        self.end_visible = False
        self.status = DisplayStatus.STOP
        self.feature: Any = None
        self.complete = False
        self.flash_until = 0

    def flash_remaining(self) -> int:
        return max(0, self.flash_until - self._now_ms())

    def show_interval(self, task: str, color: str, intro_active: bool) -> None:
        self.task = task
        self.color = color
        self.intro_active = intro_active
        if self.status is DisplayStatus.PLAY:
            self.flash_until = self._now_ms() + FLASH_MS

    def show_elapsed(self, seconds: float) -> None:
        self.elapsed = seconds

    def show_total(self, elapsed: float, total: float) -> None:
        self.total_elapsed = elapsed
        self.total_duration = total

    def show_upcoming(self, intervals: Sequence[Interval], end_visible: bool) -> None:
        self.upcoming = list(intervals)
        self.end_visible = end_visible

    def show_status(self, status: DisplayStatus) -> None:
        self.status = status

    def render_feature(self, rendered: Any) -> None:
        self.feature = rendered

    def clear_feature(self) -> None:
        self.feature = None

    def show_complete(self) -> None:
        self.complete = True
        self.flash_until = self._now_ms() + FLASH_MS


def _square_wave(freq: int, length_ms: int, volume: float = 0.3) -> bytes:
    """Signed 16-bit mono square wave with a short linear fade-out."""
    count = SAMPLE_RATE * length_ms // 1000
    half_period = max(1, SAMPLE_RATE // (2 * freq))
    peak = int(32767 * volume)
    fade = min(count, SAMPLE_RATE // 100)
    samples = array("h")
    for n in range(count):
        level = peak if (n // half_period) % 2 == 0 else -peak
        if n >= count - fade:
            level = level * (count - n) // fade
        samples.append(level)
    return samples.tobytes()


class WindowAudio:
    """Plays generated beeps. Silent if the mixer could not be opened."""

    def __init__(self) -> None:
        self._intro_end: pygame.mixer.Sound | None = None
        self._interval_end: pygame.mixer.Sound | None = None
        if not pygame.mixer.get_init():
            logger.warning("audio mixer unavailable; beeps disabled")
            return
        self._intro_end = pygame.mixer.Sound(buffer=_square_wave(*INTRO_END_BEEP))
        self._interval_end = pygame.mixer.Sound(buffer=_square_wave(*INTERVAL_END_BEEP))

    def play_intro_end(self) -> None:
        if self._intro_end is not None:
            self._intro_end.play()

    def play_interval_end(self) -> None:
        if self._interval_end is not None:
            self._interval_end.play()
