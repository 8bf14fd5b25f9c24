"""ScheduleBuilder - turns editor rows into a validated interval list."""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from practempo.config import WARMUP_EACH, Settings
from practempo.durations import format_duration, parse_duration
from practempo.ports import FeatureResolver
from practempo.types import (
    Diagnostic,
    FeatureDescriptor,
    FormatError,
    Interval,
    PractempoError,
    ResolutionError,
    StructuralError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ROW_GROUP = "group"
ROW_INTERVAL = "interval"

PLACEHOLDER_EMPTY = "empty"
PLACEHOLDER_ERROR = "error"


@dataclass(frozen=True)
class BuildResult:
    """Intervals that built cleanly plus diagnostics for every row that did not."""

    intervals: tuple[Interval, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return self.diagnostics

    @property
    def is_empty(self) -> bool:
        return not self.intervals

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    @property
    def total_duration(self) -> float:
        return float(sum(i.duration for i in self.intervals))

    def placeholder(self) -> str | None:
        """Which placeholder a caller shows instead of a schedule, if any.

        ``"empty"`` means nothing was entered yet; ``"error"`` means every
        row failed. None when there is something to run.
        """
        if self.intervals:
            return None
        return PLACEHOLDER_ERROR if self.diagnostics else PLACEHOLDER_EMPTY


class ScheduleBuilder:
    """Builds intervals from schedule rows, collecting per-row diagnostics.

    Rows are mappings in the schedule document shape: group rows
    (``rowType == "group"``, ``level``, ``name``) only label the rows that
    follow; interval rows carry ``duration``, ``task``, ``categoryName``,
    ``featureTypeName`` and ``featureArgsList``.

    Only structurally unusable input raises (``StructuralError``). Every
    per-row problem becomes a ``Diagnostic`` and the build carries on.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        resolver: FeatureResolver | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._resolver = resolver

    @property
    def settings(self) -> Settings:
        return self._settings

    def build(self, rows: Any, max_render_height: int | None = None) -> BuildResult:
        """Build from a row iterable or a document mapping with ``items``."""
        rows = _row_iterable(rows)

        intervals: list[Interval] = []
        diagnostics: list[Diagnostic] = []
        groups: list[str] = []
        total = 0.0

        for index, row in enumerate(rows):
            path = tuple(groups)
            if not isinstance(row, Mapping):
                error = FormatError(f"expected an object, got {type(row).__name__}")
                self._record(diagnostics, error, index, path)
                continue

            row_type = row.get("rowType")
            if row_type == ROW_GROUP:
                level, name = _group_level_and_name(row)
                del groups[level - 1:]
                groups.append(name)
                continue
            if row_type != ROW_INTERVAL:
                error = FormatError(f"unknown rowType {row_type!r}")
                self._record(diagnostics, error, index, path)
                continue

            try:
                interval = self._make_interval(
                    row, first=not intervals, total=total, color_index=len(intervals)
                )
            except PractempoError as e:
                self._record(diagnostics, e, index, path)
                continue

            if interval.feature is not None:
                try:
                    rendered = self._resolve(interval.feature, max_render_height)
                except ResolutionError as e:
                    self._record(diagnostics, e, index, path)
                else:
                    interval = dataclasses.replace(interval, rendered=rendered)

            intervals.append(interval)
            total += interval.duration

        result = BuildResult(intervals=tuple(intervals), diagnostics=tuple(diagnostics))
        logger.info(
            f"built {len(result.intervals)} intervals ({format_duration(total)}) "
            f"with {len(result.diagnostics)} diagnostics"
        )
        return result

    def _make_interval(
        self, row: Mapping[str, Any], first: bool, total: float, color_index: int
    ) -> Interval:
        duration = _row_duration(row.get("duration"))

        limit = self._settings.max_total_duration
        if duration > 0 and total + duration > limit:
            raise ValidationError(
                "duration",
                f"total schedule duration would exceed the {format_duration(limit)} limit",
            )

        intro = 0.0
        if first or self._settings.warmup_applies_to == WARMUP_EACH:
            intro = min(self._settings.warmup_period, duration)

        type_name = _text(row.get("featureTypeName"))
        feature = None
        if type_name:
            category = _text(row.get("categoryName")) or self._settings.default_category
            args = row.get("featureArgsList") or ()
            if isinstance(args, (str, bytes)) or not isinstance(args, Iterable):
                raise FormatError(f"featureArgsList must be a list, got {type(args).__name__}")
            feature = FeatureDescriptor(
                category_name=category,
                type_name=type_name,
                args=tuple("" if a is None else str(a) for a in args),
            )

        palette = self._settings.palette
        return Interval(
            task=_text(row.get("task")) or type_name,
            duration=duration,
            intro_duration=intro,
            color=palette[color_index % len(palette)],
            feature=feature,
        )

    def _resolve(self, feature: FeatureDescriptor, max_render_height: int | None) -> Any:
        if self._resolver is None:
            raise ResolutionError(
                f"no feature resolver for {feature.category_name}/{feature.type_name}"
            )
        try:
            rendered = self._resolver.resolve(
                feature.category_name,
                feature.type_name,
                feature.args,
                max_render_height=max_render_height,
            )
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(
                f"cannot create {feature.category_name}/{feature.type_name} "
                f"from {list(feature.args)!r}: {type(e).__name__}: {e}"
            ) from e
        if rendered is None:
            raise ResolutionError(
                f"unknown feature type {feature.type_name!r} "
                f"in category {feature.category_name!r}"
            )
        return rendered

    @staticmethod
    def _record(
        diagnostics: list[Diagnostic],
        error: PractempoError,
        index: int,
        path: tuple[str, ...],
    ) -> None:
        diagnostic = Diagnostic.from_error(error, index, path)
        logger.warning(f"schedule row skipped or degraded: {diagnostic}")
        diagnostics.append(diagnostic)


def _row_iterable(rows: Any) -> Iterable[Any]:
    if isinstance(rows, Mapping):
        rows = rows.get("items")
        if not isinstance(rows, (list, tuple)):
            raise StructuralError("schedule document has no 'items' list")
    elif hasattr(rows, "items") and isinstance(rows.items, (list, tuple)):
        rows = rows.items
    if isinstance(rows, (str, bytes)):
        raise StructuralError("schedule rows must be a sequence of objects, not text")
    try:
        return list(rows)
    except TypeError as e:
        raise StructuralError(f"schedule rows are not iterable: {type(rows).__name__}") from e


def _row_duration(raw: Any) -> int:
    if isinstance(raw, str):
        return parse_duration(raw)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise FormatError(
            f"duration must be M:SS text or whole seconds, got {type(raw).__name__}"
        )
    if isinstance(raw, float):
        if not raw.is_integer():
            raise FormatError(f"invalid duration {raw!r}: must be whole seconds")
        raw = int(raw)
    if raw < 0:
        raise FormatError(f"invalid duration {raw!r}: must be non-negative")
    return raw


def _group_level_and_name(row: Mapping[str, Any]) -> tuple[int, str]:
    level = row.get("level")
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        level = 1
    name = _text(row.get("name")) or f"Group Level {level}"
    return level, name


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""
