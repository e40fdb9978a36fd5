"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import Any, List, Optional


def normalize_timestamp(value: Any) -> Optional[datetime]:
    """
    Convert any stored timestamp representation to an aware UTC datetime.

    Accepts native datetimes/dates, client-library timestamp objects exposing
    to_datetime()/ToDatetime(), {"seconds", "nanos"} maps (with or without the
    leading underscore used by the admin SDK JSON encoding), epoch milliseconds
    and ISO-8601 strings. Anything else yields None.
    """
    if value is None or isinstance(value, bool):
        return None

    for converter in ("to_datetime", "ToDatetime", "toDate"):
        if hasattr(value, converter):
            try:
                value = getattr(value, converter)()
            except (TypeError, ValueError):
                return None
            break

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanos", value.get("_nanoseconds", 0)) or 0
        if not isinstance(seconds, (int, float)) or isinstance(seconds, bool):
            return None
        try:
            return datetime.fromtimestamp(int(seconds) + nanos / 1e9, tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return normalize_timestamp(parsed)

    return None


def month_start(reference: date, months_back: int = 0) -> date:
    """First day of the month `months_back` months before the reference month"""
    month_index = reference.year * 12 + (reference.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def trailing_month_starts(reference: date, count: int = 3) -> List[date]:
    """First days of the reference month and the preceding months, newest first"""
    return [month_start(reference, i) for i in range(count)]
