from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import to_utc_date


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_identifier(value: Optional[str], field_name: str) -> Optional[str]:
    """Filters may be omitted, but when given they must be non-empty."""
    if value is None:
        return None
    return require_non_empty(value, field_name)


def require_date(value: Any, field_name: str = "date") -> date:
    try:
        return to_utc_date(value)
    except ValidationError:
        raise ValidationError(f"{field_name} must be a calendar date")


def require_first_of_month(value: Any) -> date:
    month_start = require_date(value, "month_start")
    if month_start.day != 1:
        raise ValidationError(f"month_start must be the first day of a month, got {month_start.isoformat()}")
    return month_start
