"""
Orchestrated analysis job - SQLite catalog to results JSON.
Loads records, runs the report suite, persists the results document.
"""

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence

from ingestion.schema import CatalogRecord
from analysis.report_config import ReportParameters
from analysis.report_suite import run_report_suite
from reports.atomic_writer import write_json_atomic
from storage.loaders import load_catalog
from storage.run_registry import start_run, finish_run, RunStatus

logger = logging.getLogger(__name__)

CALCULATION_VERSION = '1.0.0'


class AnalysisJobError(Exception):
    """Raised when the results document cannot be composed."""
    pass


def compose_results(
    records: Sequence[CatalogRecord],
    params: ReportParameters,
    as_of_date: date,
    only: Optional[List[str]] = None,
    max_workers: int = 1
) -> Dict[str, Any]:
    """
    Run the report suite and wrap it in the results document.

    Args:
        records: Catalog records
        params: Report parameters
        as_of_date: Reference "today" for date-window reports
        only: Report names to run (default: all)
        max_workers: Worker threads for the suite

    Returns:
        Results dictionary (as_of_date, record_count, parameters, reports, summary, metadata)

    Raises:
        AnalysisJobError: If as_of_date is not a date
    """
    if not isinstance(as_of_date, date):
        raise AnalysisJobError(f"as_of_date must be date, got {type(as_of_date)}")

    reports = run_report_suite(
        records,
        params=params,
        today=as_of_date,
        only=only,
        max_workers=max_workers
    )

    completed = [name for name, r in reports.items() if r['status'] == 'completed']
    failed = [name for name, r in reports.items() if r['status'] == 'failed']

    return {
        'as_of_date': as_of_date.isoformat(),
        'record_count': len(records),
        'parameters': params.to_dict(),
        'reports': reports,
        'summary': {
            'reports_run': len(reports),
            'completed': len(completed),
            'failed': len(failed),
            'failed_reports': failed
        },
        'metadata': {
            'calculated_at': datetime.now().isoformat(),
            'calculation_version': CALCULATION_VERSION
        }
    }


def analyze_catalog(
    conn: sqlite3.Connection,
    output_path: Path,
    params: Optional[ReportParameters] = None,
    as_of_date: Optional[date] = None,
    only: Optional[List[str]] = None,
    max_workers: int = 1
) -> Dict[str, Any]:
    """
    Run the complete analysis over the stored catalog and save results to JSON.

    Args:
        conn: SQLite database connection
        output_path: Path to save the results JSON file
        params: Report parameters (defaults to ReportParameters())
        as_of_date: Reference date (defaults to today)
        only: Report names to run (default: all)
        max_workers: Worker threads for the suite

    Returns:
        Dictionary with job status and summary
    """
    if params is None:
        params = ReportParameters()
    if as_of_date is None:
        as_of_date = date.today()

    start_time = datetime.now()
    run_id = start_run(conn, 'catalog_analysis', started_at=start_time)

    result = {
        'run_id': run_id,
        'status': 'running',
        'as_of_date': as_of_date.isoformat(),
        'output_path': None,
        'record_count': 0,
        'reports_completed': 0,
        'reports_failed': 0,
        'error_message': None
    }

    try:
        records = load_catalog(conn)
        result['record_count'] = len(records)

        if not records:
            raise AnalysisJobError("Catalog is empty - run the ingest pipeline first")

        results = compose_results(records, params, as_of_date, only=only, max_workers=max_workers)

        write_result = write_json_atomic(results, output_path)
        if write_result['status'] != 'completed':
            raise AnalysisJobError(f"Failed to write results: {write_result['error']}")

        result['output_path'] = str(output_path)
        result['reports_completed'] = results['summary']['completed']
        result['reports_failed'] = results['summary']['failed']
        result['failed_reports'] = results['summary']['failed_reports']
        result['status'] = 'completed'

        finish_run(
            conn=conn,
            run_id=run_id,
            status=RunStatus.COMPLETED,
            rows_in=len(records),
            rows_out=results['summary']['reports_run'],
            log_path=str(output_path)
        )

    except Exception as e:
        logger.error(f"Catalog analysis failed: {e}")
        result['status'] = 'failed'
        result['error_message'] = str(e)

        finish_run(
            conn=conn,
            run_id=run_id,
            status=RunStatus.FAILED,
            rows_in=result['record_count'],
            rows_out=0,
            error_message=str(e)
        )

    result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
    return result
