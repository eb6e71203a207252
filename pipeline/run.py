"""
Pipeline runner CLI - makes the catalog ingest pipeline human-visible.
Usage: python pipeline/run.py catalog_ingest CSV_PATH [DELIMITER] [--replace]
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pipeline.catalog_ingest_dag import run_catalog_ingest, CatalogIngestConfig
from storage.loaders import init_database, get_connection
from storage.run_registry import list_recent_runs
from analysis.report_config import get_db_path, configure_logging


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        _print_usage()
        sys.exit(1)

    dag_name = sys.argv[1]

    if dag_name not in ['catalog_ingest', 'runs']:
        print(f"Unknown DAG: {dag_name}")
        print("Available commands: catalog_ingest, runs")
        sys.exit(1)

    configure_logging()

    db_path = Path(get_db_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(str(db_path))
    init_database(conn)

    try:
        if dag_name == 'runs':
            _display_runs(conn)
            return

        replace = '--replace' in sys.argv
        args = [a for a in sys.argv[2:] if a != '--replace']
        if not args:
            _print_usage()
            sys.exit(1)

        csv_path = args[0]
        delimiter = args[1] if len(args) > 1 else ','

        try:
            config = CatalogIngestConfig(csv_path=csv_path, delimiter=delimiter, replace=replace)
        except ValueError as e:
            print(f"Invalid configuration: {e}")
            sys.exit(1)

        print(f"Running catalog_ingest pipeline for {config.csv_path}")
        print()

        result = run_catalog_ingest(config, conn)

        print("Pipeline Results:")
        print(f"   Status: {result['status'].upper()}")
        print(f"   Run ID: {result['run_id']}")
        print(f"   Duration: {result['duration_seconds']:.1f}s")
        print()

        if result['status'] == 'completed':
            print("Data Processing:")
            print(f"   Rows read: {result['rows_fetched']}")
            print(f"   Rows stored: {result['rows_stored']} "
                  f"({result['rows_inserted']} new, {result['rows_updated']} updated)")
            if result.get('duplicates_collapsed', 0) > 0:
                print(f"   Duplicate ids collapsed: {result['duplicates_collapsed']}")
            if result.get('validation_warnings', 0) > 0:
                print(f"   Validation warnings: {result['validation_warnings']}")
            print()

            _display_catalog_results(result)

            print(f"Data stored in: {db_path}")

        else:  # failed
            print("Pipeline Failed:", file=sys.stderr)
            print(f"   Error: {result.get('error_message', 'Unknown error')}", file=sys.stderr)
            print(f"   Rows read: {result['rows_fetched']}", file=sys.stderr)
            print(f"   Rows stored: {result['rows_stored']}", file=sys.stderr)
            sys.exit(1)

    finally:
        conn.close()


def _print_usage():
    print("Usage:")
    print("  python pipeline/run.py catalog_ingest CSV_PATH [DELIMITER] [--replace]")
    print("  python pipeline/run.py runs")
    print()
    print("Examples:")
    print("  python pipeline/run.py catalog_ingest ./data/raw/netflix_titles.csv")
    print("  python pipeline/run.py catalog_ingest ./data/raw/titles.tsv $'\\t'")
    print("  python pipeline/run.py catalog_ingest ./data/raw/netflix_titles.csv --replace")


def _display_catalog_results(result: dict):
    """Display per-kind summary."""
    kind_counts = result.get('kind_counts')
    if kind_counts:
        print("Catalog Summary:")
        for kind, count in kind_counts.items():
            print(f"   {kind}: {count:,}")
        years = result.get('release_year_range')
        if years:
            print(f"   Release years: {years['min']} - {years['max']}")
        print()


def _display_runs(conn):
    """Display the most recent pipeline runs."""
    runs = list_recent_runs(conn, limit=10)
    if not runs:
        print("No runs recorded")
        return

    print("Recent Runs:")
    for run in runs:
        line = f"   #{run['run_id']} {run['dag_name']} {run['status'].value} started {run['started_at']}"
        if run['error_message']:
            line += f" ({run['error_message']})"
        print(line)


if __name__ == '__main__':
    main()
