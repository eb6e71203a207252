"""
Run registry - one row per ingest or analysis run in the runs table.
Records start/finish timestamps, final status, row counts and failure text.
"""

import sqlite3
from datetime import datetime
from typing import Dict, Any, List, Optional
from enum import Enum

# Column order shared by every SELECT below
_RUN_COLUMNS = (
    'run_id', 'dag_name', 'started_at', 'finished_at', 'status',
    'rows_in', 'rows_out', 'log_path', 'error_message'
)


class RunStatus(str, Enum):
    """Lifecycle states allowed by the runs.status CHECK constraint."""
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'


class RunNotFoundError(Exception):
    """Raised when run ID is not found."""
    pass


def start_run(
    conn: sqlite3.Connection,
    dag_name: str,
    started_at: Optional[datetime] = None
) -> int:
    """
    Open a run in the 'running' state.

    Args:
        conn: SQLite connection
        dag_name: 'catalog_ingest' or 'catalog_analysis'
        started_at: Start timestamp (defaults to now)

    Returns:
        New run_id
    """
    cursor = conn.execute(
        "INSERT INTO runs (dag_name, started_at, status) VALUES (?, ?, ?)",
        (dag_name, _timestamp(started_at or datetime.now()), RunStatus.RUNNING.value)
    )
    conn.commit()
    return cursor.lastrowid


def finish_run(
    conn: sqlite3.Connection,
    run_id: int,
    status: RunStatus,
    finished_at: Optional[datetime] = None,
    rows_in: Optional[int] = None,
    rows_out: Optional[int] = None,
    log_path: Optional[str] = None,
    error_message: Optional[str] = None
) -> None:
    """
    Close a run with its final status.

    Args:
        conn: SQLite connection
        run_id: Run ID from start_run()
        status: RunStatus member or its string value
        finished_at: End timestamp (defaults to now)
        rows_in: Rows read (CSV rows for ingest, records for analysis)
        rows_out: Rows produced (titles stored, reports run)
        log_path: Artifact written by the run (results JSON)
        error_message: Failure text for FAILED runs

    Raises:
        RunNotFoundError: If run_id doesn't exist
        ValueError: If status is not a RunStatus value
    """
    final_status = RunStatus(status)

    cursor = conn.execute(
        """
        UPDATE runs
        SET status = ?, finished_at = ?, rows_in = ?, rows_out = ?,
            log_path = ?, error_message = ?
        WHERE run_id = ?
        """,
        (final_status.value, _timestamp(finished_at or datetime.now()),
         rows_in, rows_out, log_path, error_message, run_id)
    )
    if cursor.rowcount == 0:
        raise RunNotFoundError(f"Run ID {run_id} not found")

    conn.commit()


def get_run_status(conn: sqlite3.Connection, run_id: int) -> Dict[str, Any]:
    """
    Fetch one run with derived duration and dropped-row count.

    Args:
        conn: SQLite connection
        run_id: Run ID to query

    Returns:
        Run dictionary (every runs column plus duration_seconds, rows_dropped)

    Raises:
        RunNotFoundError: If run_id doesn't exist
    """
    runs = _select_runs(conn, "WHERE run_id = ?", (run_id,))
    if not runs:
        raise RunNotFoundError(f"Run ID {run_id} not found")

    run_info = runs[0]
    # rows_in of 0 or NULL leaves nothing to compare against
    if run_info['rows_in'] and run_info['rows_out'] is not None:
        run_info['rows_dropped'] = run_info['rows_in'] - run_info['rows_out']
    else:
        run_info['rows_dropped'] = None

    return run_info


def list_recent_runs(
    conn: sqlite3.Connection,
    limit: int = 50,
    dag_name: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    List runs newest first, optionally for one DAG only.

    Args:
        conn: SQLite connection
        limit: Maximum number of runs to return
        dag_name: Only runs of this DAG (optional)

    Returns:
        List of run dictionaries
    """
    where, params = ("WHERE dag_name = ?", (dag_name,)) if dag_name else ("", ())
    return _select_runs(
        conn,
        f"{where} ORDER BY started_at DESC, run_id DESC LIMIT ?",
        params + (limit,)
    )


def _select_runs(conn: sqlite3.Connection, clause: str, params: tuple) -> List[Dict[str, Any]]:
    cursor = conn.execute(f"SELECT {', '.join(_RUN_COLUMNS)} FROM runs {clause}", params)
    return [_row_to_run(row) for row in cursor.fetchall()]


def _row_to_run(row: tuple) -> Dict[str, Any]:
    """Map a runs row to a dictionary with parsed timestamps and status."""
    run_info = dict(zip(_RUN_COLUMNS, row))
    for key in ('started_at', 'finished_at'):
        if run_info[key]:
            run_info[key] = datetime.fromisoformat(run_info[key])
    run_info['status'] = RunStatus(run_info['status'])

    if run_info['started_at'] and run_info['finished_at']:
        elapsed = run_info['finished_at'] - run_info['started_at']
        run_info['duration_seconds'] = int(elapsed.total_seconds())
    else:
        run_info['duration_seconds'] = None

    return run_info


def _timestamp(value: datetime) -> str:
    """SQLite datetime text (space separator, second precision)."""
    return value.strftime('%Y-%m-%d %H:%M:%S')
