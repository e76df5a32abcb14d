"""Deterministic filter, sort, and pagination steps for admin record lists.

Call context:
    ``ListViewModel.recompute`` runs ``filter_records`` -> ``sort_records`` ->
    ``paginate`` in that order. The functions are pure so they can be tested
    without a view model and reused by exports.
"""

from __future__ import annotations

import json
import math
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

from .schema import SORT_DESC, EntitySchema, FieldType, normalize_direction
from .time_utils import to_epoch_seconds

T = TypeVar("T")
Record = Mapping[str, Any]
RecordOf = Callable[[Any], Record]
SortKey = Union[float, str]


def _identity(item: Any) -> Record:
    return item


def text_value(value: Any) -> str:
    """Render a field value as the text used for search and string sorting."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(text_value(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)
    return str(value)


def number_value(value: Any) -> float:
    """Coerce a numeric field; missing or unparseable values become ``0``."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return 0.0 if math.isnan(number) else number
    text = str(value).strip().replace(",", "")
    if not text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(number) else number


def matches(record: Record, term: str, fields: Sequence[str]) -> bool:
    """Return whether any of ``fields`` contains ``term`` case-insensitively.

    Blank terms match everything. List values match when any element
    contains the term.
    """
    if not term or not term.strip():
        return True
    needle = term.casefold()
    for name in fields:
        value = record.get(name)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            if any(needle in text_value(item).casefold() for item in value):
                return True
            continue
        if needle in text_value(value).casefold():
            return True
    return False


def filter_records(
    items: Iterable[T],
    term: str,
    fields: Sequence[str],
    *,
    record_of: RecordOf = _identity,
) -> List[T]:
    """Keep items whose record matches ``term``; order is preserved."""
    return [item for item in items if matches(record_of(item), term, fields)]


def sort_key(value: Any, field_type: FieldType) -> SortKey:
    """Return the comparison key for ``value`` under ``field_type``."""
    if field_type is FieldType.DATE:
        return to_epoch_seconds(value)
    if field_type is FieldType.NUMBER:
        return number_value(value)
    return text_value(value).casefold()


def sort_records(
    items: Iterable[T],
    field: str,
    direction: str,
    schema: EntitySchema,
    *,
    record_of: RecordOf = _identity,
) -> List[T]:
    """Stable sort by ``field``; equal keys keep their input order."""
    field_type = schema.field_type(field)
    descending = normalize_direction(direction) == SORT_DESC
    return sorted(
        items,
        key=lambda item: sort_key(record_of(item).get(field), field_type),
        reverse=descending,
    )


def total_pages(count: int, page_size: int) -> int:
    """Number of pages for ``count`` items; an empty list still has one page."""
    if page_size <= 0:
        raise ValueError("page_size must be positive.")
    return max(1, math.ceil(max(0, count) / page_size))


def clamp_page(page: int, count: int, page_size: int) -> int:
    """Clamp ``page`` into ``[1, total_pages(count, page_size)]``."""
    return min(max(1, int(page)), total_pages(count, page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Return the slice for 1-based ``page``."""
    if page_size <= 0:
        raise ValueError("page_size must be positive.")
    start = (max(1, int(page)) - 1) * page_size
    return list(items[start:start + page_size])


def page_window(current: int, pages: int, max_pages: int = 5) -> List[int]:
    """Page numbers shown in the pager, centered on ``current`` when possible."""
    if pages <= 0 or max_pages <= 0:
        return []
    start = max(1, current - max_pages // 2)
    end = min(pages, start + max_pages - 1)
    if end - start + 1 < max_pages:
        start = max(1, end - max_pages + 1)
    return list(range(start, end + 1))


def find_index(
    items: Sequence[T], identity_field: str, identity: Any, *, record_of: RecordOf = _identity
) -> Optional[int]:
    """Locate the item whose identity field equals ``identity``.

    Identities are compared as text so ``"7"`` from a URL matches ``7``.
    """
    wanted = text_value(identity)
    for index, item in enumerate(items):
        if text_value(record_of(item).get(identity_field)) == wanted:
            return index
    return None


__all__ = [
    "clamp_page",
    "filter_records",
    "find_index",
    "matches",
    "number_value",
    "page_window",
    "paginate",
    "sort_key",
    "sort_records",
    "text_value",
    "total_pages",
]
