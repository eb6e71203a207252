"""
Tests for Markdown template rendering of catalog report results.
"""

import pytest

from reports.markdown_template import render_catalog_report, TemplateError


def _report(number, name, title, columns, rows, status='completed', error_message=None):
    return {
        'number': number, 'name': name, 'title': title, 'columns': columns,
        'status': status, 'rows': rows, 'row_count': len(rows),
        'error_message': error_message, 'duration_seconds': 0.0
    }


@pytest.fixture
def sample_results():
    """Results document with a table, an empty report and a failed report."""
    return {
        'as_of_date': '2021-09-25',
        'record_count': 8807,
        'parameters': {},
        'reports': {
            'yearly_country_share': _report(
                10, 'yearly_country_share', 'Yearly share of country content',
                ['year', 'total_content', 'percent_count'],
                [{'year': 2020, 'total_content': 25, 'percent_count': 25.0}]
            ),
            'type_counts': _report(
                1, 'type_counts', 'Movies and TV shows', ['kind', 'number_of_items'],
                [{'kind': 'Movie', 'number_of_items': 6131}, {'kind': 'TV Show', 'number_of_items': 2676}]
            ),
            'missing_director': _report(
                12, 'missing_director', 'Content without a director', ['id', 'title', 'director'], []
            ),
            'top_countries': _report(
                4, 'top_countries', 'Countries with the most content', ['country', 'total_content'], [],
                status='failed', error_message='ValueError: limit must be non-negative, got -1'
            ),
        },
        'summary': {'reports_run': 4, 'completed': 3, 'failed': 1, 'failed_reports': ['top_countries']},
        'metadata': {'calculated_at': '2021-09-25T10:00:00', 'calculation_version': '1.0.0'}
    }


class TestRenderCatalogReport:
    """Tests for render_catalog_report."""

    def test_header(self, sample_results):
        markdown = render_catalog_report(sample_results)

        assert markdown.startswith('# Catalog Analytics Report')
        assert '**Reference Date:** September 25, 2021' in markdown
        assert '**Titles Analyzed:** 8,807' in markdown
        assert '**Reports:** 3 completed, 1 failed' in markdown

    def test_reports_in_number_order(self, sample_results):
        markdown = render_catalog_report(sample_results)

        positions = [markdown.index(heading) for heading in [
            '## 1. Movies and TV shows',
            '## 4. Countries with the most content',
            '## 10. Yearly share of country content',
            '## 12. Content without a director',
        ]]
        assert positions == sorted(positions)

    def test_table_rows(self, sample_results):
        markdown = render_catalog_report(sample_results)

        assert '| Kind | Number Of Items |' in markdown
        assert '| Movie | 6,131 |' in markdown
        assert '| 2020 | 25 | 25.00% |' in markdown

    def test_failed_report_shows_error(self, sample_results):
        markdown = render_catalog_report(sample_results)
        assert '*Report failed: ValueError: limit must be non-negative, got -1*' in markdown

    def test_empty_report_note(self, sample_results):
        markdown = render_catalog_report(sample_results)
        assert '## 12. Content without a director\n\n*No matching titles.*' in markdown

    def test_absent_values_and_pipes(self, sample_results):
        sample_results['reports']['missing_director']['rows'] = [
            {'id': 's8', 'title': 'Blood | Water', 'director': None}
        ]

        markdown = render_catalog_report(sample_results)

        assert '| s8 | Blood \\| Water | — |' in markdown

    def test_footer(self, sample_results):
        markdown = render_catalog_report(sample_results)

        assert '## Report Metadata' in markdown
        assert '**Calculation Time:** 2021-09-25T10:00:00' in markdown

    @pytest.mark.parametrize('field', ['as_of_date', 'record_count', 'reports', 'metadata'])
    def test_missing_field(self, sample_results, field):
        del sample_results[field]
        with pytest.raises(TemplateError, match=field):
            render_catalog_report(sample_results)

    def test_empty_results(self):
        with pytest.raises(TemplateError):
            render_catalog_report({})

    def test_bad_reports_structure(self, sample_results):
        sample_results['reports'] = []
        with pytest.raises(TemplateError, match='reports must be dict'):
            render_catalog_report(sample_results)

    def test_bad_date(self, sample_results):
        sample_results['as_of_date'] = 'yesterday'
        with pytest.raises(TemplateError, match='as_of_date'):
            render_catalog_report(sample_results)
