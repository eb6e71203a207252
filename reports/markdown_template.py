"""
Markdown template for rendering catalog report results.
Pure function - no I/O, just template rendering.
"""

from datetime import datetime
from typing import Dict, Any

from reports.formatters import format_cell, format_count, format_percent, format_date_display

PERCENT_COLUMNS = {'percent_count'}


class TemplateError(Exception):
    """Raised when template rendering fails."""
    pass


def render_catalog_report(results: Dict[str, Any]) -> str:
    """
    Render the report suite results to a Markdown document.

    Args:
        results: Results dictionary written by the analysis job

    Returns:
        Formatted Markdown string

    Raises:
        TemplateError: If required fields are missing or malformed
    """
    if not results:
        raise TemplateError("Empty or invalid results provided")

    required_fields = ['as_of_date', 'record_count', 'reports', 'metadata']
    for field in required_fields:
        if field not in results:
            raise TemplateError(f"Missing required field: {field}")

    if not isinstance(results['reports'], dict):
        raise TemplateError("Invalid data structure: reports must be dict")

    reports = sorted(results['reports'].values(), key=lambda r: r.get('number', 0))

    sections = [_render_header(results)]
    sections.extend(_render_report(report) for report in reports)
    sections.append(_render_footer(results['metadata']))

    return '\n\n'.join(sections) + '\n'


def _render_header(results: Dict[str, Any]) -> str:
    """Render report header with run metadata."""
    try:
        as_of = format_date_display(results['as_of_date'])
    except Exception as e:
        raise TemplateError(f"Invalid as_of_date: {e}") from e

    summary = results.get('summary', {})
    completed = summary.get('completed', 0)
    failed = summary.get('failed', 0)

    return f"""# Catalog Analytics Report

**Reference Date:** {as_of}
**Titles Analyzed:** {format_count(results['record_count'])}
**Reports:** {completed} completed, {failed} failed
**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

---"""


def _render_report(report: Dict[str, Any]) -> str:
    """Render one report as a heading plus a table or a note."""
    try:
        heading = f"## {report['number']}. {report['title']}"
        columns = report['columns']
    except KeyError as e:
        raise TemplateError(f"Report entry missing field: {e}") from e

    if report.get('status') != 'completed':
        error = report.get('error_message') or 'Unknown error'
        return f"{heading}\n\n*Report failed: {format_cell(error, max_chars=None)}*"

    rows = report.get('rows') or []
    if not rows:
        return f"{heading}\n\n*No matching titles.*"

    lines = [heading, '']
    lines.append('| ' + ' | '.join(_column_label(c) for c in columns) + ' |')
    lines.append('|' + '|'.join('---' for _ in columns) + '|')
    for row in rows:
        lines.append('| ' + ' | '.join(_render_value(c, row.get(c)) for c in columns) + ' |')

    lines.append('')
    lines.append(f"*{format_count(len(rows))} rows*")
    return '\n'.join(lines)


def _render_value(column: str, value: Any) -> str:
    if column in PERCENT_COLUMNS and isinstance(value, (int, float)):
        return format_percent(value)
    # No thousands separator for years
    if column in ('year', 'release_year') and isinstance(value, int):
        return str(value)
    return format_cell(value)


def _column_label(column: str) -> str:
    return column.replace('_', ' ').title()


def _render_footer(metadata: Dict[str, Any]) -> str:
    """Render report footer with metadata."""
    calc_time = metadata.get('calculated_at', 'Unknown')
    version = metadata.get('calculation_version', '1.0.0')

    return f"""---

## Report Metadata

**Calculation Time:** {calc_time}
**Engine Version:** {version}"""
