"""Display labels for list cells and load states.

Call context:
    The NiceGUI list page formats table cells through ``cell_label`` and shows
    ``load_state_label`` next to the refresh button.
"""

from __future__ import annotations

from typing import Any, Optional

from tripdesk.domain.entities import LoadState
from tripdesk.domain.list_query import text_value
from tripdesk.domain.schema import FieldType
from tripdesk.domain.time_utils import parse_record_datetime

MISSING = "N/A"


def date_label(value: Any) -> str:
    """Format as ``Jan 05, 2024``; missing or unparseable values give ``N/A``."""
    parsed = parse_record_datetime(value)
    if parsed is None:
        return MISSING
    return parsed.strftime("%b %d, %Y")


def cell_label(value: Any, field_type: FieldType) -> str:
    """Text shown in a table cell for ``value``."""
    if field_type is FieldType.DATE:
        return date_label(value)
    if field_type is FieldType.BOOLEAN:
        if value is None:
            return MISSING
        return "Yes" if bool(value) else "No"
    if value is None or value == "":
        return "-"
    return text_value(value)


def load_state_label(state: Optional[LoadState]) -> str:
    mapping = {
        LoadState.IDLE: "Ready",
        LoadState.LOADING: "Loading...",
        LoadState.ERROR: "Error",
    }
    return mapping.get(state or LoadState.IDLE, "Ready")


def range_label(start: int, end: int, total: int) -> str:
    """Pager caption, e.g. ``Showing 11-20 of 42``."""
    if total <= 0:
        return "No records"
    return f"Showing {start}-{end} of {total}"


__all__ = ["MISSING", "cell_label", "date_label", "load_state_label", "range_label"]
