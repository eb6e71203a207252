"""
CSV adapter - read catalog rows from a header-named delimited file.
File IO allowed here, but minimal business logic.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List, Union

import pandas as pd

from ingestion.schema import SOURCE_COLUMN_ALIASES

logger = logging.getLogger(__name__)


class CatalogSourceError(Exception):
    """Raised when the catalog source cannot be read."""
    pass


def read_catalog_csv(path: Union[str, Path], delimiter: str = ',') -> List[Dict[str, Any]]:
    """
    Read every row of a catalog file.
    Returns raw data in source format - no normalization.

    All columns are read as text and blank cells stay empty strings, so the
    normalizer decides what counts as absent.

    Args:
        path: Path to the catalog file
        delimiter: Field delimiter (default: comma)

    Returns:
        List of raw row dictionaries keyed by source header names

    Raises:
        CatalogSourceError: If the file is missing, unreadable or lacks columns
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise CatalogSourceError(f"Catalog file not found: {csv_path}")

    try:
        data = pd.read_csv(
            csv_path,
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            encoding='utf-8'
        )
    except pd.errors.EmptyDataError as e:
        raise CatalogSourceError(f"Catalog file is empty: {csv_path}") from e
    except Exception as e:
        raise CatalogSourceError(f"Failed to read catalog file {csv_path}: {str(e)}") from e

    # Header names sometimes carry stray whitespace
    data.columns = [str(column).strip() for column in data.columns]

    _validate_columns(list(data.columns), csv_path)

    rows = data.to_dict('records')
    logger.info(f"Read {len(rows)} rows from {csv_path}")
    return rows


def _validate_columns(columns: List[str], csv_path: Path) -> None:
    """
    Check that every canonical column has at least one source header.

    Args:
        columns: Header names found in the file
        csv_path: File being read (for the error message)

    Raises:
        CatalogSourceError: If any canonical column is missing
    """
    present = set(columns)
    missing = [
        canonical for canonical, aliases in SOURCE_COLUMN_ALIASES.items()
        if not present.intersection(aliases)
    ]
    if missing:
        raise CatalogSourceError(
            f"Catalog file {csv_path} missing columns: {', '.join(missing)}"
        )
