"""
Normalizers for transforming source catalog rows to canonical shape.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

from typing import Dict, Any, List, Optional

from ingestion.schema import CATALOG_COLUMNS, SOURCE_COLUMN_ALIASES


def normalize_catalog(raw_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Transform source catalog rows to canonical shape.

    Minimal normalization:
    - Header mapping (source uses show_id/type/listed_in/...)
    - Whitespace trimming, blank optional cells to None
    - release_year to int when it parses (validators reject the rest)
    - Deduplication by id (keep last to handle corrections); blank ids are
      never merged

    Args:
        raw_rows: List of source-specific row dictionaries

    Returns:
        List of canonical catalog dictionaries, in first-seen order
    """
    if not raw_rows:
        return []

    seen_ids = {}  # For deduplication

    for position, raw in enumerate(raw_rows):
        canonical = {}
        for column in CATALOG_COLUMNS:
            canonical[column] = _clean_text(_lookup(raw, column))

        canonical['release_year'] = _parse_year(canonical['release_year'])

        # Required text columns stay strings even when blank
        for column in ('id', 'kind', 'title'):
            if canonical[column] is None:
                canonical[column] = ''

        # Last row per id wins; blank ids are kept apart for the validator to reject
        key = canonical['id'] or (None, position)
        seen_ids[key] = canonical

    return list(seen_ids.values())


def _lookup(raw: Dict[str, Any], column: str) -> Any:
    """Return the first source value found for a canonical column."""
    for alias in SOURCE_COLUMN_ALIASES[column]:
        if alias in raw:
            return raw[alias]
    return None


def _clean_text(value: Any) -> Optional[str]:
    """
    Trim a source cell; blank or missing becomes None.

    Args:
        value: Raw cell value (usually str, may be None or NaN)

    Returns:
        Stripped string or None
    """
    if value is None:
        return None
    # pandas NaN is the only value not equal to itself
    if isinstance(value, float) and value != value:
        return None
    text = str(value).strip()
    return text if text else None


def _parse_year(value: Optional[str]) -> Any:
    """
    Convert release_year text to int, leaving unparseable values as-is.

    Args:
        value: Cleaned release_year text

    Returns:
        int when the text is a whole number, otherwise the original value
    """
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    # Spreadsheet exports write years as "2020.0"
    try:
        as_float = float(value)
    except ValueError:
        return value
    if as_float.is_integer():
        return int(as_float)
    return value
