"""CSV text rendering for admin list exports.

Every cell is wrapped in double quotes. Quote and delimiter characters inside
values are written as-is; spreadsheets that need strict RFC 4180 input must
not rely on this output for free-text columns.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from .schema import EntitySchema, FieldType
from .time_utils import format_export_datetime

DELIMITER = ","
LINE_SEPARATOR = "\n"


def cell_text(value: Any, field_type: FieldType = FieldType.TEXT) -> str:
    """Return the unquoted export text for one value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (datetime, date)):
        return format_export_datetime(value)
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    if field_type is FieldType.DATE:
        formatted = format_export_datetime(value)
        return formatted or str(value)
    return str(value)


def format_cell(value: Any, field_type: FieldType = FieldType.TEXT) -> str:
    return f'"{cell_text(value, field_type)}"'


def export_csv(
    records: Iterable[Mapping[str, Any]],
    fields: Sequence[str],
    schema: Optional[EntitySchema] = None,
) -> str:
    """Serialize ``records`` into header + one quoted row per record."""
    columns = [str(name) for name in fields]
    if not columns:
        raise ValueError("export_csv requires at least one field.")
    types = [schema.field_type(name) if schema else FieldType.TEXT for name in columns]
    lines = [DELIMITER.join(columns)]
    for record in records:
        cells = [format_cell(record.get(name), ftype) for name, ftype in zip(columns, types)]
        lines.append(DELIMITER.join(cells))
    return LINE_SEPARATOR.join(lines)


def export_filename(entity: str, today: Optional[date] = None) -> str:
    """Return ``<entity>_<YYYY-MM-DD>.csv`` for download prompts."""
    stamp = (today or date.today()).strftime("%Y-%m-%d")
    token = str(entity or "export").strip().lower().replace(" ", "_") or "export"
    return f"{token}_{stamp}.csv"


__all__ = ["DELIMITER", "cell_text", "export_csv", "export_filename", "format_cell"]
