"""Calendar-month assignment for bills."""
from __future__ import annotations

from datetime import date

# Bills dated on or before this day of the month are attributed to the
# previous month; grid statements land mid-month for the prior cycle.
BUCKET_SHIFT_DAY = 20


def month_key(day: date, shift_day: int = BUCKET_SHIFT_DAY) -> str:
    """Return the ``YYYY-MM`` bucket a bill dated *day* belongs to."""
    year, month = day.year, day.month
    if day.day <= shift_day:
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return f"{year:04d}-{month:02d}"


def month_bounds(key: str) -> tuple[date, date]:
    """Return the first and last day of the ``YYYY-MM`` month *key*."""
    year, month = (int(part) for part in key.split("-"))
    first = date(year, month, 1)
    if month == 12:
        following = date(year + 1, 1, 1)
    else:
        following = date(year, month + 1, 1)
    return first, date.fromordinal(following.toordinal() - 1)
