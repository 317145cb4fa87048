"""Calendar helpers for attendance. All ranges are inclusive local calendar days."""

import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union


def to_calendar_day(value: Union[date, datetime]) -> date:
    """Truncate a date/datetime to its local calendar day (midnight)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of the month; month is 1-indexed."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def current_month_bounds(today: Optional[date] = None) -> Tuple[date, date]:
    today = today or date.today()
    return month_bounds(today.year, today.month)
