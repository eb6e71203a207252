"""
Tests for the catalog ingest DAG - CSV → normalize → validate → store → track.
Provider stubbed with unittest.mock where the file itself is not under test.
"""

import pytest
import sqlite3
from pathlib import Path
from unittest.mock import patch

from pipeline.catalog_ingest_dag import (
    run_catalog_ingest,
    CatalogIngestConfig,
    _summarize_catalog
)
from storage.loaders import init_database, load_catalog, count_catalog
from storage.run_registry import get_run_status, RunStatus
from analysis.calculations.distribution import type_counts

FIXTURE_CSV = Path(__file__).parent.parent.parent / 'tests' / 'fixtures' / 'catalog_sample.csv'


@pytest.fixture
def in_memory_db():
    """Create in-memory SQLite database for testing."""
    conn = sqlite3.connect(':memory:')
    init_database(conn)
    yield conn
    conn.close()


def _raw(show_id, **overrides):
    raw = {
        'show_id': show_id, 'type': 'Movie', 'title': f'Title {show_id}', 'director': '',
        'cast': '', 'country': 'India', 'date_added': 'June 1, 2020', 'release_year': '2020',
        'rating': 'TV-14', 'duration': '90 min', 'listed_in': 'Dramas', 'description': ''
    }
    raw.update(overrides)
    return raw


class TestCatalogIngestConfig:
    """Tests for CatalogIngestConfig validation."""

    def test_path_coerced(self):
        config = CatalogIngestConfig(csv_path='data/raw/titles.csv')
        assert config.csv_path == Path('data/raw/titles.csv')
        assert config.delimiter == ','

    def test_empty_path(self):
        with pytest.raises(ValueError):
            CatalogIngestConfig(csv_path='')

    def test_bad_delimiter(self):
        with pytest.raises(ValueError):
            CatalogIngestConfig(csv_path='titles.csv', delimiter=';;')

    def test_replace_must_be_bool(self):
        with pytest.raises(ValueError):
            CatalogIngestConfig(csv_path='titles.csv', replace='yes')


class TestRunCatalogIngest:
    """Tests for run_catalog_ingest."""

    def test_fixture_csv(self, in_memory_db):
        result = run_catalog_ingest(CatalogIngestConfig(csv_path=FIXTURE_CSV), in_memory_db)

        assert result['status'] == 'completed'
        assert result['rows_fetched'] == 11
        assert result['rows_stored'] == 10
        assert result['rows_inserted'] == 10
        assert result['rows_updated'] == 0
        assert result['validation_warnings'] == 1
        assert result['kind_counts'] == {'Movie': 7, 'TV Show': 3}
        assert result['release_year_range'] == {'min': 2007, 'max': 2021}
        assert count_catalog(in_memory_db) == {'Movie': 7, 'TV Show': 3}

    def test_run_tracked(self, in_memory_db):
        result = run_catalog_ingest(CatalogIngestConfig(csv_path=FIXTURE_CSV), in_memory_db)

        run = get_run_status(in_memory_db, result['run_id'])
        assert run['dag_name'] == 'catalog_ingest'
        assert run['status'] == RunStatus.COMPLETED
        assert run['rows_in'] == 11
        assert run['rows_out'] == 10

    def test_rerun_is_idempotent(self, in_memory_db):
        config = CatalogIngestConfig(csv_path=FIXTURE_CSV)
        run_catalog_ingest(config, in_memory_db)
        first = load_catalog(in_memory_db)

        result = run_catalog_ingest(config, in_memory_db)

        assert result['rows_inserted'] == 0
        assert result['rows_updated'] == 10
        assert load_catalog(in_memory_db) == first

    def test_stored_values(self, in_memory_db):
        run_catalog_ingest(CatalogIngestConfig(csv_path=FIXTURE_CSV), in_memory_db)
        records = {r.id: r for r in load_catalog(in_memory_db)}

        assert records['s1'].cast is None
        assert records['s2'].cast_members == ['Ama Qamata', 'Khosi Ngema']
        assert records['s8'].date_added is None
        assert records['s8'].description is None
        assert records['s9'].rating is None
        assert 's11' not in records

    def test_duplicates_collapsed(self, in_memory_db):
        rows = [_raw('s1', title='First'), _raw('s1', title='Corrected')]

        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', return_value=rows):
            result = run_catalog_ingest(CatalogIngestConfig(csv_path='titles.csv'), in_memory_db)

        assert result['status'] == 'completed'
        assert result['duplicates_collapsed'] == 1
        assert [r.title for r in load_catalog(in_memory_db)] == ['Corrected']

    def test_blank_ids_are_validation_drops(self, in_memory_db):
        rows = [_raw(''), _raw('s1'), _raw('')]

        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', return_value=rows):
            result = run_catalog_ingest(CatalogIngestConfig(csv_path='titles.csv'), in_memory_db)

        assert result['status'] == 'completed'
        assert result['duplicates_collapsed'] == 0
        assert result['validation_warnings'] == 2
        assert result['rows_stored'] == 1

    def test_second_export_merges_by_default(self, in_memory_db):
        first = [_raw('a1'), _raw('a2')]
        second = [_raw('b1', type='TV Show', duration='2 Seasons')]

        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', side_effect=[first, second]):
            run_catalog_ingest(CatalogIngestConfig(csv_path='a.csv'), in_memory_db)
            run_catalog_ingest(CatalogIngestConfig(csv_path='b.csv'), in_memory_db)

        assert count_catalog(in_memory_db) == {'Movie': 2, 'TV Show': 1}

    def test_second_export_replaces(self, in_memory_db):
        first = [_raw('a1'), _raw('a2')]
        second = [_raw('b1', type='TV Show', duration='2 Seasons')]

        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', side_effect=[first, second]):
            run_catalog_ingest(CatalogIngestConfig(csv_path='a.csv', replace=True), in_memory_db)
            result = run_catalog_ingest(CatalogIngestConfig(csv_path='b.csv', replace=True), in_memory_db)

        assert result['status'] == 'completed'
        assert (result['rows_inserted'], result['rows_updated']) == (1, 0)
        assert type_counts(load_catalog(in_memory_db)) == [{'kind': 'TV Show', 'number_of_items': 1}]

    def test_header_only_replace_empties_catalog(self, in_memory_db):
        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', side_effect=[[_raw('a1')], []]):
            run_catalog_ingest(CatalogIngestConfig(csv_path='a.csv', replace=True), in_memory_db)
            result = run_catalog_ingest(CatalogIngestConfig(csv_path='b.csv', replace=True), in_memory_db)

        assert result['status'] == 'completed'
        assert load_catalog(in_memory_db) == []

    def test_header_only_file(self, in_memory_db):
        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', return_value=[]):
            result = run_catalog_ingest(CatalogIngestConfig(csv_path='titles.csv'), in_memory_db)

        assert result['status'] == 'completed'
        assert result['rows_stored'] == 0

    def test_all_rows_invalid(self, in_memory_db):
        rows = [_raw('s1', type='Podcast'), _raw('s2', release_year='unknown')]

        with patch('pipeline.catalog_ingest_dag.read_catalog_csv', return_value=rows):
            result = run_catalog_ingest(CatalogIngestConfig(csv_path='titles.csv'), in_memory_db)

        assert result['status'] == 'failed'
        assert result['validation_warnings'] == 2
        assert 'All 2 rows failed validation' in result['error_message']
        assert get_run_status(in_memory_db, result['run_id'])['status'] == RunStatus.FAILED

    def test_missing_file(self, in_memory_db, tmp_path):
        config = CatalogIngestConfig(csv_path=tmp_path / 'missing.csv')

        result = run_catalog_ingest(config, in_memory_db)

        assert result['status'] == 'failed'
        assert 'not found' in result['error_message']
        run = get_run_status(in_memory_db, result['run_id'])
        assert run['error_message'] == result['error_message']


class TestSummarizeCatalog:
    """Tests for _summarize_catalog."""

    def test_summary(self):
        rows = [
            {'kind': 'Movie', 'release_year': 2019},
            {'kind': 'TV Show', 'release_year': 2021},
            {'kind': 'Movie', 'release_year': 2020},
        ]

        assert _summarize_catalog(rows) == {
            'kind_counts': {'Movie': 2, 'TV Show': 1},
            'release_year_range': {'min': 2019, 'max': 2021}
        }

    def test_empty(self):
        assert _summarize_catalog([]) == {}
