#!/usr/bin/env python3
"""
Report renderer - reads catalog results JSON and writes the Markdown report.
Usage: python reports/render_report.py [options]
"""

import sys
import json
import argparse
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from reports.markdown_template import render_catalog_report
from reports.atomic_writer import write_both_atomic
from analysis.report_config import get_output_dir


class ReportRenderError(Exception):
    """Raised when report rendering fails."""
    pass


def render_report(results_path: Path, output_dir: Path) -> Dict[str, Any]:
    """
    Render the Markdown report from a results JSON file.

    The report and a JSON sidecar of the results it was rendered from are
    written atomically as a pair, named after the results' reference date.

    Args:
        results_path: Results JSON written by the analysis job
        output_dir: Directory to save the Markdown report

    Returns:
        Dictionary with render results
    """
    start_time = datetime.now()
    results_path = Path(results_path)
    output_dir = Path(output_dir)

    try:
        if not results_path.exists():
            raise ReportRenderError(f'No results file found at {results_path}')

        try:
            with open(results_path, 'r', encoding='utf-8') as f:
                results = json.load(f)
        except (OSError, ValueError) as e:
            raise ReportRenderError(f'Failed to load results file: {e}') from e

        try:
            markdown_content = render_catalog_report(results)
        except Exception as e:
            raise ReportRenderError(f'Template rendering failed: {e}') from e

        paths = _create_output_paths(output_dir, results.get('as_of_date'))

        write_result = write_both_atomic(
            report_content=markdown_content,
            results=results,
            report_path=paths['report_path'],
            results_path=paths['results_path']
        )
        if write_result['status'] != 'completed':
            raise ReportRenderError(write_result['error'])

        return {
            'status': 'completed',
            'output_path': write_result['report_path'],
            'sidecar_path': write_result['results_path'],
            'results_file': str(results_path),
            'report_size_bytes': write_result['report_bytes'],
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }

    except ReportRenderError as e:
        return {
            'status': 'failed',
            'error_message': str(e),
            'output_path': None,
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }


def _create_output_paths(output_dir: Path, as_of_date: Any) -> Dict[str, Path]:
    """Report and sidecar paths for a reference date (today if absent or malformed)."""
    try:
        report_date = date.fromisoformat(as_of_date)
    except (TypeError, ValueError):
        report_date = date.today()

    stem = f"catalog_{report_date.strftime('%Y_%m_%d')}"
    return {
        'report_path': output_dir / f'{stem}.md',
        'results_path': output_dir / f'{stem}.json'
    }


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Render Markdown report from catalog results JSON',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python reports/render_report.py
  python reports/render_report.py --results ./data/processed/reports/catalog_results.json
  python reports/render_report.py --output-dir ./custom/reports/
        """
    )

    parser.add_argument('--results',
                       type=Path,
                       default=get_output_dir() / 'catalog_results.json',
                       help='Results JSON written by analysis/analyze_catalog.py')
    parser.add_argument('--output-dir',
                       type=Path,
                       default=get_output_dir(),
                       help='Directory to save Markdown reports')
    parser.add_argument('--quiet', '-q',
                       action='store_true',
                       help='Minimal output')

    args = parser.parse_args()

    if not args.quiet:
        print("Rendering catalog report")
        print(f"Results source: {args.results}")
        print(f"Output directory: {args.output_dir}")
        print()

    result = render_report(results_path=args.results, output_dir=args.output_dir)

    if result['status'] == 'completed':
        if not args.quiet:
            print("Report rendered successfully")
            print(f"Output: {result['output_path']}")
            print(f"Size: {result['report_size_bytes']:,} bytes")
            print(f"Duration: {result['duration_seconds']:.2f}s")
        else:
            print(f"Catalog report: {result['output_path']}")

        sys.exit(0)

    else:  # failed
        print(f"ERROR: Report rendering failed: {result['error_message']}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
