"""
Listing reports - filter the catalog down to the records that answer a question.
Pure functions over a read-only list of CatalogRecord; output keeps input order.
"""

from datetime import date
from typing import Dict, Any, List, Sequence

from ingestion.schema import CatalogRecord, ContentKind
from analysis.calculations.fields import (
    contains_ci,
    extract_number,
    within_window
)


def movies_released_in(records: Sequence[CatalogRecord], year: int) -> List[Dict[str, Any]]:
    """
    List movies released in a given year.

    Args:
        records: Catalog records
        year: Release year to match

    Returns:
        Rows {kind, title} in input order
    """
    return [
        {'kind': record.kind.value, 'title': record.title}
        for record in records
        if record.kind == ContentKind.MOVIE and record.release_year == year
    ]


def longest_movies(records: Sequence[CatalogRecord]) -> List[Dict[str, Any]]:
    """
    Identify the longest movie(s) by duration in minutes.

    Durations without digits are skipped. Every movie at the maximum is
    returned.

    Args:
        records: Catalog records

    Returns:
        Rows {id, title, duration_minutes}; empty if no movie has a duration
    """
    durations = []
    for record in records:
        if record.kind != ContentKind.MOVIE:
            continue
        minutes = extract_number(record.duration)
        if minutes is not None:
            durations.append((record, minutes))

    if not durations:
        return []

    longest = max(minutes for _, minutes in durations)
    return [
        {'id': record.id, 'title': record.title, 'duration_minutes': minutes}
        for record, minutes in durations
        if minutes == longest
    ]


def recently_added(
    records: Sequence[CatalogRecord],
    today: date,
    years: int = 5
) -> List[Dict[str, Any]]:
    """
    List content added on or after today minus the given number of years.

    Args:
        records: Catalog records
        today: Reference date
        years: Window length in years (default: 5)

    Returns:
        Full record rows; records with absent or malformed dates are excluded
    """
    return [
        record.to_row()
        for record in records
        if within_window(record.date_added, today, years)
    ]


def by_director(records: Sequence[CatalogRecord], name: str) -> List[Dict[str, Any]]:
    """
    List content whose director field contains a name (case-insensitive).

    Args:
        records: Catalog records
        name: Director name or fragment

    Returns:
        Full record rows
    """
    return [record.to_row() for record in records if contains_ci(record.director, name)]


def tv_shows_with_more_seasons(
    records: Sequence[CatalogRecord],
    threshold: int = 5
) -> List[Dict[str, Any]]:
    """
    List TV shows with strictly more seasons than the threshold.

    Args:
        records: Catalog records
        threshold: Season count to exceed (default: 5)

    Returns:
        Full record rows plus no_of_seasons
    """
    rows = []
    for record in records:
        if record.kind != ContentKind.TV_SHOW:
            continue
        seasons = extract_number(record.duration)
        if seasons is not None and seasons > threshold:
            row = record.to_row()
            row['no_of_seasons'] = seasons
            rows.append(row)
    return rows


def documentaries(
    records: Sequence[CatalogRecord],
    genre: str = 'Documentaries'
) -> List[Dict[str, Any]]:
    """List content whose genres mention the documentary genre (case-insensitive)."""
    return [record.to_row() for record in records if contains_ci(record.genres, genre)]


def missing_director(records: Sequence[CatalogRecord]) -> List[Dict[str, Any]]:
    """List content with no director recorded."""
    return [record.to_row() for record in records if record.director is None]
