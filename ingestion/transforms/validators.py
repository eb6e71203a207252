"""
Core validators for canonical catalog rows.
Pure functions - no IO, network, or side effects.
"""

from typing import Dict, Any, List

from ingestion.schema import CATALOG_COLUMNS, OPTIONAL_COLUMNS, ContentKind

YEAR_MIN = 1900
YEAR_MAX = 2100


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


def validate_catalog_row(row: Dict[str, Any]) -> None:
    """
    Validate a canonical catalog row.

    Args:
        row: Dictionary containing catalog data

    Raises:
        ValidationError: If validation fails
    """
    # Check for missing keys
    missing = set(CATALOG_COLUMNS) - set(row.keys())
    if missing:
        raise ValidationError(f"Missing required keys: {sorted(missing)}")

    # Required text fields
    for field in ['id', 'title']:
        value = row[field]
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be string, got {type(value)}")
        if not value.strip():
            raise ValidationError(f"{field} must be non-empty")

    # Kind must be one of the known content kinds
    kind = row['kind']
    valid_kinds = {k.value for k in ContentKind}
    if isinstance(kind, ContentKind):
        kind = kind.value
    if kind not in valid_kinds:
        raise ValidationError(f"kind must be one of {sorted(valid_kinds)}, got {kind!r}")

    # Release year
    year = row['release_year']
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError(f"release_year must be integer, got {year!r}")

    if not (YEAR_MIN <= year <= YEAR_MAX):
        raise ValidationError(f"release_year must be in {YEAR_MIN}-{YEAR_MAX}, got {year}")

    # Optional text fields are either absent or non-blank strings
    for field in OPTIONAL_COLUMNS:
        value = row[field]
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be string or None, got {type(value)}")
        if not value.strip():
            raise ValidationError(f"{field} must be None when blank")


def check_unique_ids(rows: List[Dict[str, Any]]) -> None:
    """
    Check that catalog ids are unique.

    Args:
        rows: List of catalog rows with an 'id' field

    Raises:
        ValidationError: If any id appears more than once
    """
    seen = set()
    for row in rows:
        row_id = row.get('id')
        if row_id in seen:
            raise ValidationError(f"Duplicate id found: {row_id}")
        seen.add(row_id)
