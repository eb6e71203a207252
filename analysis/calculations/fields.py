"""
Field parsing utilities shared by every catalog report.
Pure functions - malformed input yields None, never an exception.
"""

import re
from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta

_NON_DIGITS = re.compile(r'[^0-9]')
_WHITESPACE = re.compile(r'\s+')

DATE_ADDED_FORMATS = ('%B %d %Y', '%b %d %Y')


def parse_date_added(text: Optional[str]) -> Optional[date]:
    """
    Parse a "Month Day, Year" date such as "September 25, 2021".

    The comma is optional and surrounding or repeated whitespace is ignored,
    so " September 25 2021" parses too. Full and abbreviated month names are
    accepted. Anything else is treated as malformed.

    Args:
        text: Raw date_added value

    Returns:
        Parsed date, or None if absent or malformed
    """
    if not text:
        return None

    cleaned = _WHITESPACE.sub(' ', text.replace(',', ' ')).strip()
    if not cleaned:
        return None

    for fmt in DATE_ADDED_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    return None


def extract_number(text: Optional[str]) -> Optional[int]:
    """
    Extract the number from a duration such as "90 min" or "3 Seasons".

    Every non-digit character is stripped and the remaining digits are read
    as one integer.

    Args:
        text: Raw duration value

    Returns:
        Integer, or None if no digits are present
    """
    if not text:
        return None

    digits = _NON_DIGITS.sub('', text)
    if not digits:
        return None

    return int(digits)


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test; an absent haystack never matches."""
    if haystack is None:
        return False
    return needle.casefold() in haystack.casefold()


def window_start(today: date, years: int) -> date:
    """
    First date inside a trailing window of whole years ending at today.

    Calendar-aware: 2024-02-29 minus one year is 2023-02-28.

    Args:
        today: Reference date
        years: Window length in years

    Returns:
        Inclusive lower bound of the window
    """
    return today - relativedelta(years=years)


def within_window(text: Optional[str], today: date, years: int) -> bool:
    """True when the parsed date is on or after today minus the given years."""
    parsed = parse_date_added(text)
    if parsed is None:
        return False
    return parsed >= window_start(today, years)
