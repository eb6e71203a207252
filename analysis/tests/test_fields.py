"""
Tests for shared field parsing - dates, durations, substring matching, windows.
Malformed input yields None, never an exception.
"""

import pytest
from datetime import date

from analysis.calculations.fields import (
    parse_date_added,
    extract_number,
    contains_ci,
    window_start,
    within_window
)


class TestParseDateAdded:
    """Tests for parse_date_added."""

    @pytest.mark.parametrize('text,expected', [
        ('September 25, 2021', date(2021, 9, 25)),
        ('September 25 2021', date(2021, 9, 25)),
        (' September 25, 2021 ', date(2021, 9, 25)),
        ('September  5,   2021', date(2021, 9, 5)),
        ('Sep 25, 2021', date(2021, 9, 25)),
        ('february 29, 2020', date(2020, 2, 29)),
    ])
    def test_valid_formats(self, text, expected):
        assert parse_date_added(text) == expected

    @pytest.mark.parametrize('text', [
        None, '', '   ', 'not a date', '2021-09-25', 'February 30, 2021', 'Septembre 25, 2021'
    ])
    def test_malformed_is_none(self, text):
        assert parse_date_added(text) is None


class TestExtractNumber:
    """Tests for extract_number."""

    @pytest.mark.parametrize('text,expected', [
        ('90 min', 90),
        ('312 min', 312),
        ('1 Season', 1),
        ('3 Seasons', 3),
        ('12 Seasons', 12),
    ])
    def test_extracts_digits(self, text, expected):
        assert extract_number(text) == expected

    def test_all_digits_concatenated(self):
        """Every digit in the field is read as one number."""
        assert extract_number('1 h 30 min') == 130

    @pytest.mark.parametrize('text', [None, '', 'min', 'Seasons'])
    def test_no_digits_is_none(self, text):
        assert extract_number(text) is None


class TestContainsCi:
    """Tests for contains_ci."""

    def test_case_insensitive(self):
        assert contains_ci('Rajiv Chilaka, Anirban Lahiri', 'rajiv chilaka')
        assert contains_ci('International Movies, DOCUMENTARIES', 'Documentaries')

    def test_no_match(self):
        assert not contains_ci('Prabhu Deva', 'Rajiv')

    def test_absent_never_matches(self):
        assert not contains_ci(None, 'India')


class TestWindow:
    """Tests for window_start and within_window."""

    def test_window_start_calendar_aware(self):
        assert window_start(date(2024, 2, 29), 1) == date(2023, 2, 28)
        assert window_start(date(2021, 9, 25), 5) == date(2016, 9, 25)

    def test_boundary_inclusive(self):
        today = date(2021, 9, 25)
        assert within_window('September 25, 2016', today, 5)
        assert not within_window('September 24, 2016', today, 5)

    def test_future_dates_included(self):
        assert within_window('January 1, 2030', date(2021, 9, 25), 5)

    def test_malformed_excluded(self):
        assert not within_window('not a date', date(2021, 9, 25), 5)
        assert not within_window(None, date(2021, 9, 25), 5)
