"""Duration text parsing and formatting."""
from __future__ import annotations

from practempo.types import FormatError


def parse_duration(text: str) -> int:
    """Parse ``"SS"``, ``"M:SS"`` or ``"H:MM:SS"`` into whole seconds.

    Every field must be a non-negative integer and every field after the
    first must be below 60. Raises ``FormatError`` otherwise.
    """
    if not isinstance(text, str) or not text.strip():
        raise FormatError("duration must be a non-empty string")

    parts = text.strip().split(":")
    if len(parts) > 3:
        raise FormatError(f"invalid duration {text!r}: use M:SS or SS")

    values: list[int] = []
    for part in parts:
        part = part.strip()
        if not (part.isascii() and part.isdigit()):
            raise FormatError(f"invalid duration {text!r}: use M:SS or SS")
        values.append(int(part))

    for value in values[1:]:
        if value >= 60:
            raise FormatError(
                f"invalid duration {text!r}: minutes and seconds must be below 60"
            )

    total = 0
    for value in values:
        total = total * 60 + value
    return total


def format_duration(seconds: float) -> str:
    """Format seconds as ``M:SS``. Negative values format as ``0:00``."""
    if seconds != seconds or seconds < 0:  # NaN
        return "0:00"
    whole = int(seconds)
    return f"{whole // 60}:{whole % 60:02d}"
