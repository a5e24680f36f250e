from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional

from ..core.constants import DAYS_PER_YEAR


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()


def subtract_months(value: date, months: int) -> date:
    """Go back `months` calendar months, clamping the day to the target month's length."""
    month_index = value.year * 12 + (value.month - 1) - int(months)
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def format_long_date(value: date) -> str:
    """Render a date the way reports print it, e.g. 'Jan 05, 2024'."""
    return value.strftime("%b %d, %Y")


def age_in_years(date_of_birth: date, today: date, *, days_per_year: float = DAYS_PER_YEAR) -> int:
    return int((today - date_of_birth).days // days_per_year)


def isoformat_or_none(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None
