"""Date parsing for bill text: "Nov 14, 2024", "11/14/24", and year inference."""
from __future__ import annotations
from datetime import date, timedelta
import re

MONTH_ABBREVIATIONS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


def parse_month_name(raw_string: str) -> int:
    """Return the month number for a three-letter month abbreviation."""
    key = raw_string.strip()[:3].lower()
    if key not in MONTH_ABBREVIATIONS:
        raise ValueError(f"Unknown month: {raw_string}")
    return MONTH_ABBREVIATIONS[key]


def parse_long_date(raw_string: str) -> date:
    """Parse "Mon D, YYYY" (comma optional) into a date."""
    m = re.match(r'^\s*([A-Za-z]{3})[A-Za-z]*\.?\s+(\d{1,2}),?\s+(\d{4})\s*$', raw_string)
    if not m:
        raise ValueError(f"Cannot parse date: {raw_string}")
    return date(int(m.group(3)), parse_month_name(m.group(1)), int(m.group(2)))


def parse_slash_date(raw_string: str) -> date:
    """Parse "M/D/YY" or "M/D/YYYY"; two-digit years are taken as 2000 + year."""
    m = re.match(r'^\s*(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})\s*$', raw_string)
    if not m:
        raise ValueError(f"Cannot parse date: {raw_string}")
    month, day, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
    if len(m.group(3)) == 2:
        year += 2000
    return date(year, month, day)


def infer_billing_year(end_month: int, due_date: date | None, today: date | None = None) -> int:
    """Infer the year of a billing period printed without one.

    The due date anchors the year. A period ending in December that is due
    in January belongs to the year before the due date. Without a due date the
    current year is used and the due month is taken as January.
    """
    if due_date is not None:
        due_year, due_month = due_date.year, due_date.month
    else:
        due_year, due_month = (today or date.today()).year, 1

    if end_month == 12 and due_month == 1:
        return due_year - 1
    return due_year


def shift_days(day: date, days: int) -> date:
    """Return *day* moved by *days* (negative moves back)."""
    return day + timedelta(days=days)
