"""
Catalog ingest DAG - orchestrates the CSV to SQLite catalog pipeline.
Composes: Provider → Transform → Validate → Store → Track.
"""

import logging
import sqlite3
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Union

from ingestion.providers.csv_adapter import read_catalog_csv
from ingestion.transforms.normalizers import normalize_catalog
from ingestion.transforms.validators import validate_catalog_row, check_unique_ids, ValidationError
from storage.loaders import upsert_catalog
from storage.run_registry import start_run, finish_run, RunStatus

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Raised when pipeline execution fails."""
    pass


@dataclass
class CatalogIngestConfig:
    """Configuration for the catalog ingest pipeline."""
    csv_path: Union[str, Path]
    delimiter: str = ','
    replace: bool = False

    def __post_init__(self):
        """Validate settings."""
        if not self.csv_path or not isinstance(self.csv_path, (str, Path)):
            raise ValueError("csv_path must be non-empty string or Path")
        self.csv_path = Path(self.csv_path)

        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise ValueError("delimiter must be a single character")

        if not isinstance(self.replace, bool):
            raise ValueError("replace must be a boolean")


def run_catalog_ingest(config: CatalogIngestConfig, conn: sqlite3.Connection) -> Dict[str, Any]:
    """
    Run the complete catalog ingest pipeline.

    Pipeline stages:
    1. Start run tracking
    2. Read raw rows from the CSV export
    3. Normalize to canonical format
    4. Validate each row (invalid rows are dropped with a warning)
    5. Store valid rows (replacing the whole catalog when config.replace)
    6. Finish run tracking with counts

    Args:
        config: Pipeline configuration
        conn: SQLite database connection

    Returns:
        Dictionary with run results and counts
    """
    run_id = start_run(conn, 'catalog_ingest')
    start_time = datetime.now()

    result = {
        'csv_path': str(config.csv_path),
        'run_id': run_id,
        'status': 'running',
        'rows_fetched': 0,
        'rows_stored': 0,
        'rows_inserted': 0,
        'rows_updated': 0,
        'validation_warnings': 0,
        'error_message': None
    }

    try:
        # Stage 1: Read raw rows
        raw_rows = read_catalog_csv(config.csv_path, delimiter=config.delimiter)
        result['rows_fetched'] = len(raw_rows)
        logger.info(f"Read {len(raw_rows)} rows from {config.csv_path}")

        if not raw_rows:
            # Header-only export is not an error; replace still empties the catalog
            if config.replace:
                upsert_catalog(conn, [], replace=True)
            finish_run(
                conn=conn,
                run_id=run_id,
                status=RunStatus.COMPLETED,
                finished_at=datetime.now(),
                rows_in=0,
                rows_out=0
            )
            result['status'] = 'completed'
            result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
            return result

        # Stage 2: Normalize to canonical format
        normalized = normalize_catalog(raw_rows)
        duplicates = len(raw_rows) - len(normalized)
        if duplicates:
            logger.warning(f"Collapsed {duplicates} duplicate ids (last row wins)")
        result['duplicates_collapsed'] = duplicates

        # Stage 3: Validate each row
        valid_rows = []
        validation_warnings = 0

        for row in normalized:
            try:
                validate_catalog_row(row)
                valid_rows.append(row)
            except ValidationError as e:
                validation_warnings += 1
                logger.warning(f"Validation warning for {row.get('id') or 'unknown'}: {e}")

        result['validation_warnings'] = validation_warnings

        if not valid_rows:
            raise PipelineError(f"All {len(normalized)} rows failed validation")

        check_unique_ids(valid_rows)

        # Stage 4: Store valid rows
        inserted, updated = upsert_catalog(conn, valid_rows, replace=config.replace)
        result['rows_stored'] = len(valid_rows)
        result['rows_inserted'] = inserted
        result['rows_updated'] = updated

        # Stage 5: Summary
        result.update(_summarize_catalog(valid_rows))

        # Stage 6: Finish run tracking
        finish_run(
            conn=conn,
            run_id=run_id,
            status=RunStatus.COMPLETED,
            finished_at=datetime.now(),
            rows_in=len(raw_rows),
            rows_out=len(valid_rows)
        )

        result['status'] = 'completed'
        result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
        logger.info(f"Stored {len(valid_rows)} titles ({inserted} new, {updated} updated)")

        return result

    except Exception as e:
        error_message = str(e)
        logger.error(f"Catalog ingest failed: {error_message}")

        finish_run(
            conn=conn,
            run_id=run_id,
            status=RunStatus.FAILED,
            finished_at=datetime.now(),
            rows_in=result['rows_fetched'],
            rows_out=result['rows_stored'],
            error_message=error_message
        )

        result['status'] = 'failed'
        result['error_message'] = error_message
        result['duration_seconds'] = (datetime.now() - start_time).total_seconds()

        return result


def _summarize_catalog(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Summarize stored rows by kind and release year.

    Args:
        rows: Validated catalog rows

    Returns:
        Dictionary with kind_counts and release_year_range
    """
    if not rows:
        return {}

    kinds = Counter(getattr(row['kind'], 'value', row['kind']) for row in rows)
    years = [row['release_year'] for row in rows]

    return {
        'kind_counts': dict(sorted(kinds.items())),
        'release_year_range': {
            'min': min(years),
            'max': max(years)
        }
    }
