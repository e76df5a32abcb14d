"""Datetime parsing helpers for record fields coming from the REST API."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

EXPORT_DATETIME_FORMAT = "%Y-%m-%d %H:%M"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Numbers above this are treated as JavaScript millisecond timestamps.
_MILLIS_THRESHOLD = 100_000_000_000
# .NET emits up to 7 fractional digits; datetime takes exactly 6 on 3.9/3.10.
_FRACTION = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")


def parse_record_datetime(value: Any) -> Optional[datetime]:
    """Parse a record date value into a datetime, or ``None`` when unusable.

    Accepts ``datetime``/``date`` objects, numeric epoch values (seconds or
    milliseconds), and ISO-8601 text including a trailing ``Z`` and the
    space-separated variants emitted by the backend.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        seconds = float(value)
        if abs(seconds) >= _MILLIS_THRESHOLD:
            seconds = seconds / 1000.0
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None
    normalized = text
    if normalized.endswith("Z") or normalized.endswith("z"):
        normalized = normalized[:-1] + "+00:00"
    if len(normalized) > 10 and normalized[10] == " ":
        normalized = f"{normalized[:10]}T{normalized[11:]}"
    normalized = _FRACTION.sub(_six_digit_fraction, normalized)
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return _parse_with_fallback(_FRACTION.sub(_six_digit_fraction, text))


def _six_digit_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def _parse_with_fallback(text: str) -> Optional[datetime]:
    fallback_formats = (
        "%Y-%m-%dT%H:%M:%S.%f",
        "%Y-%m-%d %H:%M:%S",
        "%Y/%m/%d",
        "%d/%m/%Y",
        "%b %d, %Y",
    )
    for fmt in fallback_formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def to_epoch_seconds(value: Any) -> float:
    """Return the epoch timestamp of ``value``; missing/unparseable is ``0``.

    Naive datetimes are interpreted as UTC so ordering does not depend on the
    machine time zone.
    """
    parsed = parse_record_datetime(value)
    if parsed is None:
        return 0.0
    if parsed.tzinfo is None or parsed.tzinfo.utcoffset(parsed) is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed - _EPOCH).total_seconds()


def format_export_datetime(value: Any) -> str:
    """Render a date value as ``YYYY-MM-DD HH:MM``; unusable values give ``""``."""
    parsed = parse_record_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime(EXPORT_DATETIME_FORMAT)


__all__ = [
    "EXPORT_DATETIME_FORMAT",
    "format_export_datetime",
    "parse_record_datetime",
    "to_epoch_seconds",
]
