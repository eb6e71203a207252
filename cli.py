#!/usr/bin/env python3
"""
Main CLI for the catalog analytics workbench.
Usage: python cli.py run CSV_PATH | python cli.py report
"""

import sys
import argparse
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from analysis.analysis_job import analyze_catalog
from analysis.report_config import (
    load_report_config,
    get_db_path,
    get_output_dir,
    configure_logging,
    ReportConfigError
)
from pipeline.catalog_ingest_dag import run_catalog_ingest, CatalogIngestConfig
from reports.render_report import render_report
from storage.loaders import init_database, get_connection

RESULTS_FILENAME = 'catalog_results.json'


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Catalog analytics workbench',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py run ./data/raw/netflix_titles.csv
  python cli.py run ./data/raw/netflix_titles.csv --as-of 2021-09-25 --workers 4
  python cli.py report
        """
    )
    subparsers = parser.add_subparsers(dest='command')

    run_parser = subparsers.add_parser('run', help='Ingest a CSV export, analyze it and render the report')
    run_parser.add_argument('csv_path', help='Catalog CSV export')
    run_parser.add_argument('--as-of',
                            type=date.fromisoformat,
                            default=date.today(),
                            help='Reference date for date-window reports (YYYY-MM-DD, default: today)')
    run_parser.add_argument('--config', help='Report parameters YAML')
    run_parser.add_argument('--workers', type=int, default=1, help='Worker threads for the report suite')

    report_parser = subparsers.add_parser('report', help='Render the report from the latest results JSON')
    report_parser.add_argument('--results', type=Path, help='Results JSON (default: {output_dir}/catalog_results.json)')

    args = parser.parse_args()
    configure_logging()

    if args.command == 'run':
        run_all(args.csv_path, args.as_of, args.config, args.workers)
    elif args.command == 'report':
        generate_report(args.results or get_output_dir() / RESULTS_FILENAME)
    else:
        parser.print_help()
        sys.exit(1)


def run_all(csv_path: str, as_of: date, config_path: str = None, workers: int = 1):
    """
    Ingest, analyze and render in one pass.

    Args:
        csv_path: Catalog CSV export
        as_of: Reference date
        config_path: Report parameters YAML (optional)
        workers: Worker threads for the report suite
    """
    try:
        params = load_report_config(config_path)
    except ReportConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    db_path = Path(get_db_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    output_dir = get_output_dir()

    conn = get_connection(str(db_path))
    try:
        init_database(conn)

        # 1. Ingest
        try:
            config = CatalogIngestConfig(csv_path=csv_path, replace=True)
        except ValueError as e:
            print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
            sys.exit(1)

        ingest = run_catalog_ingest(config, conn)
        if ingest['status'] != 'completed':
            print(f"ERROR: Ingest failed: {ingest['error_message']}", file=sys.stderr)
            sys.exit(1)
        print(f"Ingested {ingest['rows_stored']} titles "
              f"({ingest['validation_warnings']} rows dropped)")

        # 2. Analyze
        results_path = output_dir / RESULTS_FILENAME
        analysis = analyze_catalog(
            conn=conn,
            output_path=results_path,
            params=params,
            as_of_date=as_of,
            max_workers=workers
        )
        if analysis['status'] != 'completed':
            print(f"ERROR: Analysis failed: {analysis['error_message']}", file=sys.stderr)
            sys.exit(1)
        print(f"Ran {analysis['reports_completed']} reports ({analysis['reports_failed']} failed)")
    finally:
        conn.close()

    # 3. Render
    generate_report(results_path)


def generate_report(results_path: Path):
    """
    Render the Markdown report for a results JSON file.

    Args:
        results_path: Results JSON written by the analysis job
    """
    result = render_report(results_path=results_path, output_dir=get_output_dir())

    if result['status'] != 'completed':
        print(f"ERROR: Report generation failed: {result['error_message']}", file=sys.stderr)
        print("Run the analysis first: python cli.py run CSV_PATH", file=sys.stderr)
        sys.exit(1)

    print("Report generation complete!")
    print(f"Report: {result['output_path']}")
    print(f"Results: {result['sidecar_path']}")


if __name__ == '__main__':
    main()
