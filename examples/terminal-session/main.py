"""Terminal practice session - plays a schedule document in the console.

Usage:
    python main.py ../schedules/guitar_basics.json
    python main.py ../schedules/guitar_basics.json --warmup 10 --speed 30

Ctrl+C pauses the session and prints where it stopped.
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Any, Sequence

from practempo import (
    DisplayStatus,
    FeatureRegistry,
    Interval,
    MonotonicTickSource,
    Schedule,
    ScheduleBuilder,
    StructuralError,
    format_duration,
    load_document,
)
from practempo.builder import PLACEHOLDER_EMPTY
from practempo.config import WARMUP_EACH, WARMUP_FIRST, Settings

logger = logging.getLogger("terminal-session")

NOTES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
SCALE_STEPS = {"major": (2, 2, 1, 2, 2, 2), "minor": (2, 1, 2, 2, 1, 2)}


def _note(name: str) -> int:
    key = name.strip().upper()
    if key not in NOTES:
        raise ValueError(f"unknown note {name!r}")
    return NOTES.index(key)


def scale(args: Sequence[str], max_height: int | None) -> list[str]:
    """Notes of a scale: ``[root, mode]``."""
    if not args:
        raise ValueError("a scale needs a root note")
    root = _note(args[0])
    mode = args[1].lower() if len(args) > 1 else "major"
    if mode not in SCALE_STEPS:
        raise ValueError(f"unknown mode {mode!r}")

    notes = [NOTES[root]]
    i = root
    for step in SCALE_STEPS[mode]:
        i = (i + step) % len(NOTES)
        notes.append(NOTES[i])
    return [f"{NOTES[root]} {mode}", " ".join(notes)]


def chords(args: Sequence[str], max_height: int | None) -> list[str]:
    """A chord progression, one chord per line."""
    if not args:
        raise ValueError("a chord progression needs at least one chord")
    return [f"{n + 1}. {name}" for n, name in enumerate(args)]


def metronome(args: Sequence[str], max_height: int | None) -> list[str]:
    bpm = int(args[0]) if args else 60
    if not 20 <= bpm <= 300:
        raise ValueError(f"bpm {bpm} out of range")
    return [f"{bpm} bpm", "| x . . . | x . . . |"]


def make_registry() -> FeatureRegistry:
    registry = FeatureRegistry()
    registry.register("Guitar", "Scale", scale)
    registry.register("Guitar", "Chord", chords)
    registry.register("Guitar", "Metronome", metronome)
    return registry


class TerminalDisplay:
    """Prints display updates; elapsed time is redrawn on a single line."""

    def __init__(self, out=sys.stdout) -> None:
        self.out = out
        self.total = "0:00 / 0:00"

    def _line(self, text: str) -> None:
        self.out.write("\r\033[K" + text + "\n")
        self.out.flush()

    def show_interval(self, task: str, color: str, intro_active: bool) -> None:
        suffix = " (Warmup)" if intro_active else ""
        self._line(f"== {task or '(Untitled)'}{suffix} [{color}]")

    def show_elapsed(self, seconds: float) -> None:
        self.out.write(f"\r\033[K  {format_duration(seconds)}   total {self.total}")
        self.out.flush()

    def show_total(self, elapsed: float, total: float) -> None:
        self.total = f"{format_duration(elapsed)} / {format_duration(total)}"

    def show_upcoming(self, intervals: Sequence[Interval], end_visible: bool) -> None:
        names = [i.task or "(Untitled)" for i in intervals]
        if end_visible:
            names.append("END")
        self._line("   next: " + ", ".join(names))

    def show_status(self, status: DisplayStatus) -> None:
        self._line(f"   [{status.value}]")

    def render_feature(self, rendered: Any) -> None:
        for line in rendered:
            self._line(f"   {line}")

    def clear_feature(self) -> None:
        pass

    def show_complete(self) -> None:
        self._line("== DONE!")


class TerminalAudio:
    def __init__(self, out=sys.stdout) -> None:
        self.out = out

    def play_intro_end(self) -> None:
        self.out.write("\a")
        self.out.flush()

    def play_interval_end(self) -> None:
        self.out.write("\a\a")
        self.out.flush()


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a practice schedule in the terminal")
    p.add_argument("schedule", help="Path to a schedule JSON document")
    p.add_argument(
        "--warmup", type=int, default=0, help="Warmup seconds per interval (default: 0)"
    )
    p.add_argument(
        "--warmup-applies-to",
        choices=[WARMUP_FIRST, WARMUP_EACH],
        default=WARMUP_FIRST,
        help="Apply the warmup to the first interval or to each (default: first)",
    )
    p.add_argument(
        "--speed", type=float, default=1.0, help="Clock speed multiplier (default: 1.0)"
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    args = p.parse_args()
    if args.speed <= 0:
        p.error("--speed must be positive")
    return args


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        doc = load_document(args.schedule)
    except (OSError, StructuralError) as e:
        print(f"cannot load {args.schedule}: {e}", file=sys.stderr)
        return 2

    settings = Settings(warmup_period=args.warmup, warmup_applies_to=args.warmup_applies_to)
    result = ScheduleBuilder(settings, make_registry()).build(doc.items)
    for diag in result.diagnostics:
        print(f"warning: {diag}", file=sys.stderr)

    placeholder = result.placeholder()
    if placeholder is not None:
        if placeholder == PLACEHOLDER_EMPTY:
            print("Nothing to practice yet: the schedule has no intervals.")
        else:
            print("Every row of the schedule has an error; nothing to run.")
        return 1

    speed = args.speed
    ticks = MonotonicTickSource(
        now=lambda: time.monotonic() * speed,
        sleep=lambda seconds: time.sleep(seconds / speed),
    )
    schedule = Schedule(result.intervals, TerminalDisplay(), TerminalAudio(), ticks, settings)

    print(f"{doc.name or 'Untitled schedule'} - {format_duration(result.total_duration)}")
    schedule.prepare()
    schedule.start()
    try:
        ticks.run(until=schedule.is_finished)
    except KeyboardInterrupt:
        schedule.pause()
        interval = schedule.get_current_interval()
        task = interval.task if interval else ""
        print(
            f"\nStopped in {task or '(Untitled)'!r} at {format_duration(schedule.elapsed)}, "
            f"{format_duration(schedule.total_elapsed)} practiced."
        )
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
