from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, List

from ..core.constants import DATE_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def today_utc() -> date:
    """Current calendar date in UTC.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).date()


def to_utc_date(value: Any) -> date:
    """Normalise a date-like value to a UTC calendar date.

    Aware datetimes are converted to UTC first; naive ones are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Invalid date: {value!r}")


def parse_api_date(value: str) -> date:
    """Parse a backend date, either ``YYYY-MM-DD`` or a full ISO timestamp."""
    text = value.strip()
    if len(text) == 10:
        return parse_iso_date(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc_date(datetime.fromisoformat(text))


def first_of_next_month(month_start: date) -> date:
    if month_start.month == 12:
        return date(month_start.year + 1, 1, 1)
    return date(month_start.year, month_start.month + 1, 1)


def month_days(month_start: date) -> List[date]:
    """Every date from ``month_start`` up to, not including, the next month's first day."""
    end = first_of_next_month(month_start)
    days = []
    d = month_start
    while d < end:
        days.append(d)
        d += timedelta(days=1)
    return days


def month_label(month_start: date) -> str:
    return month_start.strftime("%B %Y")
