"""Shared value types and the error taxonomy for practempo."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PractempoError(Exception):
    """Base class for all practempo errors."""


class ValidationError(PractempoError):
    """Raised when an interval is constructed with out-of-range timing."""

    def __init__(self, field_name: str, message: str) -> None:
        self.field = field_name
        super().__init__(f"{field_name}: {message}")


class ResolutionError(PractempoError):
    """Raised when a feature descriptor cannot be resolved."""


class FormatError(PractempoError):
    """Raised when duration text cannot be parsed."""


class StructuralError(PractempoError):
    """Raised when a schedule document or row list is malformed as a whole."""


class Status(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class DisplayStatus(str, Enum):
    """Play-state indicator shown by display sinks."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"


@dataclass(frozen=True)
class FeatureDescriptor:
    category_name: str
    type_name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Interval:
    """One timed task. ``rendered`` is the resolver output for ``feature``."""

    task: str
    duration: float
    intro_duration: float = 0
    color: str = ""
    feature: FeatureDescriptor | None = None
    rendered: Any = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.duration) or self.duration <= 0:
            raise ValidationError(
                "duration", f"must be a finite positive number, got {self.duration!r}"
            )
        if not math.isfinite(self.intro_duration) or self.intro_duration < 0:
            raise ValidationError(
                "intro_duration", f"must be finite and non-negative, got {self.intro_duration!r}"
            )
        if self.intro_duration > self.duration:
            raise ValidationError(
                "intro_duration",
                f"{self.intro_duration!r} exceeds duration {self.duration!r}",
            )

    def is_intro_active(self, elapsed: float) -> bool:
        return elapsed < self.intro_duration


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal, row-scoped build problem."""

    kind: str  # error class name: ValidationError, FormatError, ResolutionError
    row_index: int
    message: str
    group_path: tuple[str, ...] = ()

    @classmethod
    def from_error(
        cls, error: PractempoError, row_index: int, group_path: tuple[str, ...] = ()
    ) -> Diagnostic:
        return cls(
            kind=type(error).__name__,
            row_index=row_index,
            message=str(error),
            group_path=group_path,
        )

    def __str__(self) -> str:
        where = f"row {self.row_index + 1}"
        if self.group_path:
            where += f" ({' > '.join(self.group_path)})"
        return f"{self.kind} at {where}: {self.message}"
