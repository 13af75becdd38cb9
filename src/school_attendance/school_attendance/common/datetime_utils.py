from __future__ import annotations

from datetime import date, datetime

from ..core.constants import ISO_DATE_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def require_iso_date(value: object, field_name: str) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format") from None


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("start_date must not be after end_date")
