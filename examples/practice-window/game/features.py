"""Guitar feature factories for the practice window.

Each factory returns a list of text lines, cut to what fits in the feature
panel when the builder passes a render height.
"""
from __future__ import annotations

from typing import Sequence

from practempo import FeatureRegistry

from ui.constants import LINE_H

NOTES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
SCALE_STEPS = {"major": (2, 2, 1, 2, 2, 2), "minor": (2, 1, 2, 2, 1, 2)}
STRINGS = ("E", "B", "G", "D", "A", "E")
FRETS = 12


def _fit(lines: list[str], max_height: int | None) -> list[str]:
    if max_height is None:
        return lines
    return lines[: max(1, max_height // LINE_H)]


def _note(name: str) -> int:
    key = name.strip().upper()
    if key not in NOTES:
        raise ValueError(f"unknown note {name!r}")
    return NOTES.index(key)


def scale(args: Sequence[str], max_height: int | None) -> list[str]:
    """Fretboard diagram of a scale: ``[root, mode]``."""
    if not args:
        raise ValueError("a scale needs a root note")
    root = _note(args[0])
    mode = args[1].lower() if len(args) > 1 else "major"
    if mode not in SCALE_STEPS:
        raise ValueError(f"unknown mode {mode!r}")

    pitches = {root}
    i = root
    for step in SCALE_STEPS[mode]:
        i = (i + step) % len(NOTES)
        pitches.add(i)

    lines = [f"{NOTES[root]} {mode}"]
    for string in STRINGS:
        open_note = _note(string)
        frets = "".join(
            "o" if (open_note + fret) % len(NOTES) in pitches else "-"
            for fret in range(FRETS + 1)
        )
        lines.append(f"{string} |{frets}|")
    return _fit(lines, max_height)


def chords(args: Sequence[str], max_height: int | None) -> list[str]:
    """A chord progression, one chord per line."""
    if not args:
        raise ValueError("a chord progression needs at least one chord")
    return _fit([f"{n + 1}. {name}" for n, name in enumerate(args)], max_height)


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
