"""Recording collaborators shared by the test modules."""
from __future__ import annotations

from typing import Any, Sequence

from practempo.types import DisplayStatus, Interval


class RecordingDisplay:
    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def show_interval(self, task: str, color: str, intro_active: bool) -> None:
        self.events.append(("interval", task, color, intro_active))

    def show_elapsed(self, seconds: float) -> None:
        self.events.append(("elapsed", seconds))

    def show_total(self, elapsed: float, total: float) -> None:
        self.events.append(("total", elapsed, total))

    def show_upcoming(self, intervals: Sequence[Interval], end_visible: bool) -> None:
        self.events.append(("upcoming", [i.task for i in intervals], end_visible))

    def show_status(self, status: DisplayStatus) -> None:
        self.events.append(("status", status))

    def render_feature(self, rendered: Any) -> None:
        self.events.append(("feature", rendered))

    def clear_feature(self) -> None:
        self.events.append(("clear",))

    def show_complete(self) -> None:
        self.events.append(("complete",))

    def of(self, kind: str) -> list[tuple[Any, ...]]:
        return [e for e in self.events if e[0] == kind]

    def last(self, kind: str) -> tuple[Any, ...]:
        return self.of(kind)[-1]


class RecordingAudio:
    def __init__(self) -> None:
        self.events: list[str] = []

    def play_intro_end(self) -> None:
        self.events.append("intro_end")

    def play_interval_end(self) -> None:
        self.events.append("interval_end")


class StubResolver:
    """Resolves every ``(category, type)`` in ``known`` to a tagged tuple."""

    def __init__(self, known: set[tuple[str, str]] | None = None) -> None:
        self.known = known if known is not None else {("Guitar", "Scale")}
        self.calls: list[tuple[str, str, tuple[str, ...], int | None]] = []

    def resolve(
        self,
        category_name: str,
        type_name: str,
        args: Sequence[str],
        max_render_height: int | None = None,
    ) -> Any | None:
        self.calls.append((category_name, type_name, tuple(args), max_render_height))
        if (category_name, type_name) not in self.known:
            return None
        return ("rendered", type_name, tuple(args))


class ExplodingDisplay(RecordingDisplay):
    """Raises from show_elapsed once armed."""

    def __init__(self) -> None:
        super().__init__()
        self.armed = False

    def show_elapsed(self, seconds: float) -> None:
        super().show_elapsed(seconds)
        if self.armed:
            raise RuntimeError("display went away")


def interval_row(
    duration: str, task: str = "", feature: str = "", *args: str, category: str = ""
) -> dict:
    return {
        "rowType": "interval",
        "duration": duration,
        "task": task,
        "categoryName": category,
        "featureTypeName": feature,
        "featureArgsList": list(args),
    }


def group_row(name: str, level: int = 1) -> dict:
    return {"rowType": "group", "level": level, "name": name}
