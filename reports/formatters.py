"""
Display formatters for catalog report tables.
Deterministic string formatting for counts, percentages, cells and dates.
"""

from datetime import datetime, date
from typing import Any, Optional, Union

MISSING = '—'
MAX_CELL_CHARS = 60


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


def format_count(value: Optional[int]) -> str:
    """
    Format a count with thousands separators.

    Args:
        value: Non-negative integer count

    Returns:
        Formatted count (e.g., "1,234")
    """
    if value is None:
        return MISSING

    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatterError(f"Count must be integer, got {type(value)}")

    return f"{value:,}"


def format_percent(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a percentage that is already scaled to 0-100.

    Args:
        value: Percentage (25.0 = 25%)
        decimal_places: Number of decimal places (default: 2)

    Returns:
        Formatted percentage string (e.g., "25.00%")
    """
    if value is None:
        return MISSING

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"Percentage value must be numeric, got {type(value)}")

    return f"{value:.{decimal_places}f}%"


def format_cell(value: Any, max_chars: Optional[int] = MAX_CELL_CHARS) -> str:
    """
    Format any report value as Markdown table cell text.

    Absent values render as an em dash. Pipes are escaped and newlines
    collapsed so the cell never breaks the table row.

    Args:
        value: Cell value (str, int, float or None)
        max_chars: Truncate longer text with an ellipsis (None = no limit)

    Returns:
        Cell text
    """
    if value is None:
        return MISSING

    if isinstance(value, bool):
        text = 'Yes' if value else 'No'
    elif isinstance(value, int):
        text = format_count(value)
    elif isinstance(value, float):
        text = f"{value:.2f}"
    else:
        text = ' '.join(str(value).split())

    if max_chars is not None and len(text) > max_chars:
        text = text[:max_chars - 1].rstrip() + '…'

    return text.replace('|', '\\|')


def format_date_display(date_input: Union[str, date, datetime, None]) -> str:
    """
    Format date as "Month D, YYYY".

    Args:
        date_input: ISO date/datetime string, date object, or datetime object

    Returns:
        Formatted date string (e.g., "September 25, 2021")
    """
    if date_input is None:
        return MISSING

    if isinstance(date_input, str):
        try:
            if 'T' in date_input:
                date_obj = datetime.fromisoformat(date_input).date()
            else:
                date_obj = date.fromisoformat(date_input)
        except ValueError:
            raise FormatterError(f"Invalid date string: {date_input}")
    elif isinstance(date_input, datetime):
        date_obj = date_input.date()
    elif isinstance(date_input, date):
        date_obj = date_input
    else:
        raise FormatterError(f"Date must be string, date, or datetime, got {type(date_input)}")

    return f"{date_obj.strftime('%B')} {date_obj.day}, {date_obj.year}"
