"""
Country share report - yearly percentage of a country's catalog additions.
Pure functions over a read-only list of CatalogRecord.
"""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Sequence

from ingestion.schema import CatalogRecord
from analysis.calculations.fields import parse_date_added

_CENT = Decimal('0.01')


class EmptyDenominatorError(ValueError):
    """Raised when a share is requested over zero matching records."""
    pass


def share_percent(part: int, total: int) -> float:
    """
    Percentage of part in total, rounded half-up to 2 decimal places.

    Args:
        part: Count for one group
        total: Count for all groups

    Returns:
        Percentage (25.0 = 25%)

    Raises:
        EmptyDenominatorError: If total is zero
    """
    if total <= 0:
        raise EmptyDenominatorError("Cannot compute share of an empty total")

    pct = (Decimal(part) * 100 / Decimal(total)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return float(pct)


def yearly_country_share(
    records: Sequence[CatalogRecord],
    country: str = 'India',
    limit: int = 5
) -> List[Dict[str, Any]]:
    """
    Share of a country's content added in each year, top years first.

    Only records whose whole country field equals the country are counted
    (multi-country records do not match). Records with absent or malformed
    dates are excluded from both the per-year counts and the total, so the
    percentages over all years sum to 100.

    Args:
        records: Catalog records
        country: Exact country value to match (default: 'India')
        limit: Number of years to return (default: 5)

    Returns:
        Rows {year, total_content, percent_count} by percent descending, then year

    Raises:
        EmptyDenominatorError: If no dated record matches the country
    """
    years = Counter()
    for record in records:
        if record.country is None or record.country.strip() != country:
            continue
        added = parse_date_added(record.date_added)
        if added is not None:
            years[added.year] += 1

    total = sum(years.values())
    if total == 0:
        raise EmptyDenominatorError(f"No dated content found for country {country!r}")

    rows = [
        {'year': year, 'total_content': count, 'percent_count': share_percent(count, total)}
        for year, count in years.items()
    ]
    rows.sort(key=lambda row: (-row['total_content'], row['year']))
    return rows[:limit]
