"""Collaborator protocols consumed by the schedule and the builder."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol, Sequence

if TYPE_CHECKING:
    from practempo.types import DisplayStatus, Interval

TickCallback = Callable[[float], None]
TickHandle = int


class DisplaySink(Protocol):
    """Port for everything the schedule shows to the user."""

    def show_interval(self, task: str, color: str, intro_active: bool) -> None:
        """Show the current interval's label and accent colour."""

    def show_elapsed(self, seconds: float) -> None:
        """Show time spent in the current interval."""

    def show_total(self, elapsed: float, total: float) -> None:
        """Show schedule-wide progress."""

    def show_upcoming(self, intervals: Sequence[Interval], end_visible: bool) -> None:
        """Show the next few intervals. ``end_visible`` marks the schedule end."""

    def show_status(self, status: DisplayStatus) -> None:
        """Show the play/pause/stop indicator."""

    def render_feature(self, rendered: Any) -> None:
        """Render the resolved feature of the current interval."""

    def clear_feature(self) -> None:
        """Remove any rendered feature."""

    def show_complete(self) -> None:
        """Show the terminal "schedule complete" state."""


class AudioSink(Protocol):
    def play_intro_end(self) -> None: ...

    def play_interval_end(self) -> None: ...


class FeatureResolver(Protocol):
    def resolve(
        self,
        category_name: str,
        type_name: str,
        args: Sequence[str],
        max_render_height: int | None = None,
    ) -> Any | None:
        """Return a renderable object, or None when the type is unknown."""


class TickSource(Protocol):
    """Periodic wake-ups delivering elapsed-seconds deltas."""

    def schedule(self, interval_ms: int, callback: TickCallback) -> TickHandle:
        """Register ``callback`` to be called roughly every ``interval_ms``."""

    def cancel(self, handle: TickHandle) -> None:
        """Stop a registration. Unknown handles are ignored."""
