"""Calendar period helpers for monthly views."""

from datetime import date
from typing import Optional, Tuple

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def get_current_month(today: Optional[date] = None) -> int:
    """1-indexed month of today (or the given date)."""
    return (today or date.today()).month


def get_current_year(today: Optional[date] = None) -> int:
    return (today or date.today()).year


def resolve_target_period(
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None
) -> Tuple[int, int]:
    """Fill in a missing month and/or year with the current one."""
    today = today or date.today()
    return (
        month if month is not None else today.month,
        year if year is not None else today.year,
    )


def get_month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ""


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """First day of the month and first day of the following month."""
    start_date = date(year, month, 1)
    if month == 12:
        end_date = date(year + 1, 1, 1)
    else:
        end_date = date(year, month + 1, 1)
    return start_date, end_date
