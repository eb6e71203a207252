#!/usr/bin/env python3
"""
CLI tool for running the catalog report suite.
Usage: python analysis/analyze_catalog.py [options]
"""

import sys
import sqlite3
import argparse
import json
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from analysis.analysis_job import analyze_catalog
from analysis.report_config import (
    load_report_config,
    get_db_path,
    get_output_dir,
    configure_logging,
    ReportConfigError
)
from analysis.report_suite import REPORT_REGISTRY


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Run the catalog analytics reports',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analysis/analyze_catalog.py
  python analysis/analyze_catalog.py --as-of 2021-09-25
  python analysis/analyze_catalog.py --only type_counts --only longest_movies
  python analysis/analyze_catalog.py --config config/reports.yml --workers 4
        """
    )

    parser.add_argument('--db-path',
                       default=get_db_path(),
                       help='Path to SQLite database (default: $CATALOG_DB_PATH or ./data/catalog.db)')
    parser.add_argument('--output',
                       help='Output JSON file path (default: {output_dir}/catalog_results.json)')
    parser.add_argument('--as-of',
                       type=date.fromisoformat,
                       default=date.today(),
                       help='Reference date for date-window reports (YYYY-MM-DD, default: today)')
    parser.add_argument('--config',
                       help='Report parameters YAML (default: $CATALOG_REPORT_CONFIG or ./config/reports.yml)')
    parser.add_argument('--only',
                       action='append',
                       choices=sorted(REPORT_REGISTRY),
                       help='Run only this report (repeatable)')
    parser.add_argument('--workers',
                       type=int,
                       default=1,
                       help='Worker threads for the report suite (default: 1)')
    parser.add_argument('--quiet', '-q',
                       action='store_true',
                       help='Minimal output (just success/failure)')

    args = parser.parse_args()
    configure_logging()

    # Set default output path
    if args.output is None:
        args.output = get_output_dir() / 'catalog_results.json'
    else:
        args.output = Path(args.output)

    # Validate database exists
    if not Path(args.db_path).exists():
        print(f"ERROR: Database not found: {args.db_path}", file=sys.stderr)
        print("Run the ingest pipeline first: python pipeline/run.py catalog_ingest netflix_titles.csv", file=sys.stderr)
        sys.exit(1)

    try:
        params = load_report_config(args.config)
    except ReportConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.quiet:
        print("Analyzing catalog")
        print(f"Database: {args.db_path}")
        print(f"Reference date: {args.as_of}")
        print()

    try:
        conn = sqlite3.connect(args.db_path)
    except Exception as e:
        print(f"ERROR: Database connection failed: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        result = analyze_catalog(
            conn=conn,
            output_path=args.output,
            params=params,
            as_of_date=args.as_of,
            only=args.only,
            max_workers=args.workers
        )

        if result['status'] == 'completed':
            if not args.quiet:
                print("Analysis completed")
                print(f"Records analyzed: {result['record_count']}")
                print(f"Reports completed: {result['reports_completed']}")
                if result['reports_failed']:
                    print(f"Reports failed: {result['reports_failed']} ({', '.join(result['failed_reports'])})")
                print(f"Duration: {result['duration_seconds']:.1f}s")
                print(f"Results saved to: {result['output_path']}")
                print()

                _show_quick_summary(result['output_path'])
            else:
                print(f"Catalog analysis complete: {result['output_path']}")

            sys.exit(0)

        else:  # failed
            print(f"ERROR: Analysis failed: {result['error_message']}", file=sys.stderr)
            sys.exit(1)

    except Exception as e:
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)

    finally:
        conn.close()


def _show_quick_summary(output_path: str):
    """Show row counts per report."""
    try:
        with open(output_path, 'r', encoding='utf-8') as f:
            results = json.load(f)

        print("Report Summary:")
        for report in results['reports'].values():
            if report['status'] == 'completed':
                print(f"   {report['number']:>2}. {report['title']}: {report['row_count']} rows")
            else:
                print(f"   {report['number']:>2}. {report['title']}: FAILED ({report['error_message']})")
        print()

    except (OSError, ValueError, KeyError) as e:
        print(f"WARNING: Could not show summary: {e}")


if __name__ == '__main__':
    main()
