"""practempo - A guided practice-session timer core."""

from practempo.builder import BuildResult, ScheduleBuilder
from practempo.config import Settings, settings_from_dict
from practempo.document import (
    ScheduleDocument,
    dump_document,
    intervals_to_document,
    load_document,
    parse_document,
)
from practempo.durations import format_duration, parse_duration
from practempo.registry import FeatureRegistry
from practempo.schedule import Schedule
from practempo.ticks import MonotonicTickSource, VirtualTickSource
from practempo.types import (
    Diagnostic,
    DisplayStatus,
    FeatureDescriptor,
    FormatError,
    Interval,
    PractempoError,
    ResolutionError,
    Status,
    StructuralError,
    ValidationError,
)

__all__ = [
    "Schedule",
    "ScheduleBuilder",
    "BuildResult",
    "Interval",
    "FeatureDescriptor",
    "Diagnostic",
    "Status",
    "DisplayStatus",
    "Settings",
    "settings_from_dict",
    "FeatureRegistry",
    "VirtualTickSource",
    "MonotonicTickSource",
    "ScheduleDocument",
    "parse_document",
    "load_document",
    "dump_document",
    "intervals_to_document",
    "parse_duration",
    "format_duration",
    "PractempoError",
    "ValidationError",
    "ResolutionError",
    "FormatError",
    "StructuralError",
]
