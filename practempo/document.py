"""Schedule document codec (the JSON shape the editor saves)."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from practempo.durations import format_duration
from practempo.types import Interval, StructuralError

logger = logging.getLogger(__name__)


@dataclass
class ScheduleDocument:
    """A named, ordered list of group and interval rows."""

    items: list[dict[str, Any]] = field(default_factory=list)
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.name and self.name.strip():
            data["name"] = self.name.strip()
        data["items"] = self.items
        return data


def parse_document(text: str) -> ScheduleDocument:
    """Parse and normalize document JSON.

    Raises ``StructuralError`` for invalid JSON, a non-object top level or a
    missing ``items`` list. Items that are neither groups nor intervals are
    dropped with a warning; interval fields are trimmed and args stringified.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StructuralError(f"invalid JSON: {e}") from e
    return document_from_dict(data)


def document_from_dict(data: Any) -> ScheduleDocument:
    if not isinstance(data, dict):
        raise StructuralError("expected a top-level object")
    items = data.get("items")
    if not isinstance(items, list):
        raise StructuralError("expected an 'items' array within the object")

    name = data.get("name")
    doc = ScheduleDocument(name=name.strip() if isinstance(name, str) else None)
    for index, item in enumerate(items):
        row_type = item.get("rowType") if isinstance(item, dict) else None
        if row_type == "group":
            doc.items.append(_normalize_group(item))
        elif row_type == "interval":
            doc.items.append(_normalize_interval(item))
        else:
            logger.warning(f"skipping invalid schedule item at index {index}: {item!r}")
    return doc


def load_document(path: str | Path) -> ScheduleDocument:
    return parse_document(Path(path).read_text(encoding="utf-8"))


def dump_document(doc: ScheduleDocument) -> str:
    return json.dumps(doc.to_dict(), indent=2)


def intervals_to_document(
    intervals: Iterable[Interval], name: str | None = None
) -> ScheduleDocument:
    """Serialize built intervals back into document rows.

    Warmup is not written; it comes from settings on the next build.
    """
    items: list[dict[str, Any]] = []
    for interval in intervals:
        feature = interval.feature
        items.append(
            {
                "rowType": "interval",
                "duration": format_duration(interval.duration),
                "task": interval.task,
                "categoryName": feature.category_name if feature else "",
                "featureTypeName": feature.type_name if feature else "",
                "featureArgsList": list(feature.args) if feature else [],
            }
        )
    return ScheduleDocument(items=items, name=name)


def _normalize_group(item: dict[str, Any]) -> dict[str, Any]:
    level = item.get("level")
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        level = 1
    name = item.get("name")
    return {
        "rowType": "group",
        "level": level,
        "name": name.strip() if isinstance(name, str) else f"Group Level {level}",
    }


def _normalize_interval(item: dict[str, Any]) -> dict[str, Any]:
    args = item.get("featureArgsList")
    return {
        "rowType": "interval",
        "duration": _trimmed(item.get("duration")) or "0:00",
        "task": _trimmed(item.get("task")),
        "categoryName": _trimmed(item.get("categoryName")),
        "featureTypeName": _trimmed(item.get("featureTypeName")),
        "featureArgsList": (
            ["" if a is None else str(a) for a in args] if isinstance(args, list) else []
        ),
    }


def _trimmed(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""
