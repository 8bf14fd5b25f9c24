"""Session settings."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

WARMUP_FIRST = "first"
WARMUP_EACH = "each"

DEFAULT_PALETTE = (
    "#e7cba9",
    "#aad9cd",
    "#e8d595",
    "#8da47e",
    "#e9bbb5",
)

# Stored settings use the editor's camelCase keys.
_CAMEL_KEYS = {
    "warmupPeriod": "warmup_period",
    "warmupAppliesTo": "warmup_applies_to",
    "maxTotalDuration": "max_total_duration",
    "upcomingCount": "upcoming_count",
    "tickIntervalMs": "tick_interval_ms",
    "defaultCategory": "default_category",
    "palette": "palette",
}


@dataclass(frozen=True)
class Settings:
    """Immutable global settings for building and running a schedule.

    Attributes:
        warmup_period: Seconds of warmup applied as an interval's intro.
        warmup_applies_to: ``"first"`` (only the first built interval) or
            ``"each"`` (every interval).
        max_total_duration: Cap, in seconds, on the summed schedule length.
        upcoming_count: How many intervals after the current one to display.
        tick_interval_ms: Requested tick cadence.
        default_category: Feature category assumed when a row names none.
        palette: Accent colours assigned to intervals in rotation.
    """

    warmup_period: float = 0
    warmup_applies_to: str = WARMUP_FIRST
    max_total_duration: float = 3 * 60 * 60
    upcoming_count: int = 5
    tick_interval_ms: int = 1000
    default_category: str = "Guitar"
    palette: tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        if not self.warmup_period >= 0:
            raise ValueError("warmup_period must be non-negative")
        if self.warmup_applies_to not in (WARMUP_FIRST, WARMUP_EACH):
            raise ValueError(
                f"warmup_applies_to must be {WARMUP_FIRST!r} or {WARMUP_EACH!r}"
            )
        if not self.max_total_duration > 0:
            raise ValueError("max_total_duration must be positive")
        if self.upcoming_count < 0:
            raise ValueError("upcoming_count must be non-negative")
        if not self.tick_interval_ms > 0:
            raise ValueError("tick_interval_ms must be positive")
        if not self.palette:
            raise ValueError("palette must not be empty")


def settings_from_dict(data: Mapping[str, Any] | None) -> Settings:
    """Merge a stored settings mapping over the defaults.

    Accepts camelCase or snake_case keys; unknown keys are ignored.
    """
    if not data:
        return Settings()
    known = {f.name for f in fields(Settings)}
    values: dict[str, Any] = {}
    for key, value in data.items():
        name = _CAMEL_KEYS.get(key, key)
        if name not in known:
            continue
        if name == "palette":
            value = tuple(value)
        values[name] = value
    return Settings(**values)
