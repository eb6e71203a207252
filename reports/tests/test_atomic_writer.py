"""
Tests for atomic writer - temp write → fsync → rename.
Simulated interruption tests to verify atomicity.
"""

import pytest
import tempfile
import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

from reports.atomic_writer import (
    write_text_atomic,
    write_json_atomic,
    write_both_atomic
)


class TestWriteTextAtomic:
    """Tests for write_text_atomic."""

    def test_success(self):
        content = "# Catalog Analytics Report\n\nÉté, naïve — ünïcode.\n"

        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'report.md'

            result = write_text_atomic(content, output_path)

            assert result['status'] == 'completed'
            assert result['bytes_written'] == len(content.encode('utf-8'))
            assert output_path.read_text(encoding='utf-8') == content

    def test_creates_directory(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'reports' / 'nested' / 'report.md'

            result = write_text_atomic('content', output_path)

            assert result['status'] == 'completed'
            assert output_path.exists()

    def test_overwrites_existing(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'report.md'
            output_path.write_text('Original content')

            write_text_atomic('New content', output_path)

            assert output_path.read_text() == 'New content'

    def test_interrupted_rename_leaves_original(self):
        """A failed rename keeps the old file and removes the temp file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'report.md'
            output_path.write_text('Original content')

            with patch('reports.atomic_writer.os.replace', side_effect=OSError('interrupted')):
                result = write_text_atomic('New content', output_path)

            assert result['status'] == 'failed'
            assert 'interrupted' in result['error']
            assert output_path.read_text() == 'Original content'
            assert list(Path(temp_dir).glob('*.tmp')) == []


class TestWriteJsonAtomic:
    """Tests for write_json_atomic."""

    def test_dates_serialized_as_strings(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'results.json'

            result = write_json_atomic({'as_of_date': date(2021, 9, 25), 'rows': [1, 2]}, output_path)

            assert result['status'] == 'completed'
            saved = json.loads(output_path.read_text())
            assert saved == {'as_of_date': '2021-09-25', 'rows': [1, 2]}

    def test_unserializable_payload(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'results.json'
            payload = {}
            payload['self'] = payload

            result = write_json_atomic(payload, output_path)

            assert result['status'] == 'failed'
            assert 'serialization' in result['error']
            assert not output_path.exists()


class TestWriteBothAtomic:
    """Tests for write_both_atomic."""

    def test_both_written(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            report_path = Path(temp_dir) / 'catalog.md'
            results_path = Path(temp_dir) / 'catalog.json'

            result = write_both_atomic('# Report\n', {'record_count': 3}, report_path, results_path)

            assert result['status'] == 'completed'
            assert result['report_written'] and result['results_written']
            assert report_path.read_text() == '# Report\n'
            assert json.loads(results_path.read_text()) == {'record_count': 3}

    def test_sidecar_failure_removes_report(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            report_path = Path(temp_dir) / 'catalog.md'
            results_path = Path(temp_dir) / 'catalog.json'

            with patch('reports.atomic_writer.write_json_atomic',
                       return_value={'status': 'failed', 'error': 'disk full'}):
                result = write_both_atomic('# Report\n', {}, report_path, results_path)

            assert result['status'] == 'failed'
            assert 'disk full' in result['error']
            assert not report_path.exists()

    def test_report_failure_skips_sidecar(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            report_path = Path(temp_dir) / 'catalog.md'
            results_path = Path(temp_dir) / 'catalog.json'

            with patch('reports.atomic_writer.write_text_atomic',
                       return_value={'status': 'failed', 'error': 'read-only'}):
                result = write_both_atomic('# Report\n', {}, report_path, results_path)

            assert result['status'] == 'failed'
            assert not results_path.exists()
