"""
Database loaders - idempotent upsert and load functions for SQLite.
Thin IO layer with focus on data integrity and idempotence.
"""

import logging
import sqlite3
from typing import Dict, Any, List, Tuple

import pandas as pd

from ingestion.schema import CATALOG_COLUMNS, CatalogRecord

logger = logging.getLogger(__name__)

# Canonical field -> catalog table column
CATALOG_TABLE_COLUMNS = {
    'id': 'show_id',
    'kind': 'show_type',
    'title': 'title',
    'director': 'director',
    'cast': 'casts',
    'country': 'country',
    'date_added': 'date_added',
    'release_year': 'release_year',
    'rating': 'rating',
    'duration': 'duration',
    'genres': 'listed_in',
    'description': 'description',
}


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database with required tables.
    Idempotent - safe to call multiple times.

    Args:
        conn: SQLite connection
    """
    # Create catalog table
    conn.execute("""
        CREATE TABLE IF NOT EXISTS catalog (
            show_id TEXT NOT NULL PRIMARY KEY,
            show_type TEXT NOT NULL,
            title TEXT NOT NULL,
            director TEXT,
            casts TEXT,
            country TEXT,
            date_added TEXT,
            release_year INTEGER NOT NULL,
            rating TEXT,
            duration TEXT,
            listed_in TEXT,
            description TEXT
        )
    """)

    # Create runs table
    conn.execute("""
        CREATE TABLE IF NOT EXISTS runs (
            run_id INTEGER PRIMARY KEY AUTOINCREMENT,
            dag_name TEXT NOT NULL,
            started_at DATETIME NOT NULL,
            finished_at DATETIME,
            status TEXT NOT NULL CHECK(status IN ('running', 'completed', 'failed')),
            rows_in INTEGER,
            rows_out INTEGER,
            log_path TEXT,
            error_message TEXT
        )
    """)

    conn.execute("CREATE INDEX IF NOT EXISTS idx_catalog_type ON catalog(show_type)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_runs_status ON runs(status)")

    conn.commit()


def get_connection(db_path: str = './data/catalog.db') -> sqlite3.Connection:
    """
    Get SQLite connection with proper configuration.

    Args:
        db_path: Path to SQLite database file

    Returns:
        Configured SQLite connection
    """
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def upsert_catalog(
    conn: sqlite3.Connection,
    rows: List[Dict[str, Any]],
    replace: bool = False
) -> Tuple[int, int]:
    """
    Upsert canonical catalog rows into database.
    Idempotent - can be called multiple times with same data.

    With replace=True the existing catalog is deleted first, in the same
    transaction as the inserts, so the table holds exactly this export.

    Args:
        conn: SQLite connection
        rows: List of canonical catalog dictionaries
        replace: Drop titles not present in rows

    Returns:
        Tuple of (inserted_count, updated_count)
    """
    if not rows and not replace:
        return (0, 0)

    inserted = 0
    updated = 0

    table_columns = [CATALOG_TABLE_COLUMNS[c] for c in CATALOG_COLUMNS]
    non_key = [c for c in CATALOG_COLUMNS if c != 'id']

    update_sql = "UPDATE catalog SET {} WHERE show_id = ?".format(
        ', '.join(f"{CATALOG_TABLE_COLUMNS[c]} = ?" for c in non_key)
    )
    insert_sql = "INSERT INTO catalog ({}) VALUES ({})".format(
        ', '.join(table_columns),
        ', '.join('?' for _ in table_columns)
    )

    try:
        if replace:
            deleted = conn.execute("DELETE FROM catalog").rowcount
            logger.info(f"Catalog replace: cleared {deleted} existing titles")

        for row in rows:
            values = {c: _db_value(row.get(c)) for c in CATALOG_COLUMNS}

            # Check if row exists (by primary key)
            cursor = conn.execute(
                "SELECT COUNT(*) FROM catalog WHERE show_id = ?",
                (values['id'],)
            )
            exists = cursor.fetchone()[0] > 0

            if exists:
                conn.execute(update_sql, [values[c] for c in non_key] + [values['id']])
                updated += 1
            else:
                conn.execute(insert_sql, [values[c] for c in CATALOG_COLUMNS])
                inserted += 1
    except sqlite3.Error:
        conn.rollback()
        raise

    conn.commit()
    logger.info(f"Catalog upsert: {inserted} inserted, {updated} updated")
    return (inserted, updated)


def load_catalog(conn: sqlite3.Connection) -> List[CatalogRecord]:
    """
    Load every catalog row as an immutable record, in load order.

    Args:
        conn: SQLite connection

    Returns:
        List of CatalogRecord
    """
    table_columns = [CATALOG_TABLE_COLUMNS[c] for c in CATALOG_COLUMNS]
    query = f"SELECT {', '.join(table_columns)} FROM catalog ORDER BY rowid ASC"

    df = pd.read_sql_query(query, conn)
    if df.empty:
        return []

    df = df.rename(columns={v: k for k, v in CATALOG_TABLE_COLUMNS.items()})
    # NULL must stay None, never NaN
    df = df.astype(object).where(pd.notna(df), None)

    return [CatalogRecord.from_row(row) for row in df.to_dict('records')]


def count_catalog(conn: sqlite3.Connection) -> Dict[str, int]:
    """
    Count stored catalog rows per content kind.

    Args:
        conn: SQLite connection

    Returns:
        Dictionary mapping kind to row count
    """
    cursor = conn.execute("""
        SELECT show_type, COUNT(*) FROM catalog
        GROUP BY show_type
        ORDER BY show_type
    """)
    return {row[0]: row[1] for row in cursor.fetchall()}


def _db_value(value: Any) -> Any:
    """Store enum members by their plain value."""
    return getattr(value, 'value', value)
