"""
Cast reports - performer appearance counts.
Pure functions over a read-only list of CatalogRecord.
"""

from datetime import date
from typing import Dict, Any, List, Sequence

from ingestion.schema import CatalogRecord, ContentKind
from analysis.calculations.distribution import rank_tokens
from analysis.calculations.fields import contains_ci, within_window


def actor_movie_count(
    records: Sequence[CatalogRecord],
    actor: str,
    today: date,
    years: int = 10
) -> int:
    """
    Count movies featuring an actor that were added within a trailing window.

    The actor matches as a case-insensitive substring of the cast field.
    Records with absent cast or absent/malformed dates never match.

    Args:
        records: Catalog records
        actor: Actor name or fragment
        today: Reference date
        years: Window length in years (default: 10)

    Returns:
        Number of matching movies
    """
    return sum(
        1 for record in records
        if record.kind == ContentKind.MOVIE
        and contains_ci(record.cast, actor)
        and within_window(record.date_added, today, years)
    )


def top_actors_in_country(
    records: Sequence[CatalogRecord],
    country: str,
    limit: int = 10
) -> List[Dict[str, Any]]:
    """
    Rank actors by number of movies produced in a country.

    Country matches as a case-insensitive substring of the country field.
    Each cast member of a matching movie gets one count. Ties at the cut
    are broken by actor name.

    Args:
        records: Catalog records
        country: Country name or fragment
        limit: Number of actors to return (default: 10)

    Returns:
        Rows {actor, no_of_movies}, highest count first
    """
    tokens = (
        actor
        for record in records
        if record.kind == ContentKind.MOVIE
        and record.cast is not None
        and contains_ci(record.country, country)
        for actor in record.cast_members
    )
    return [
        {'actor': actor, 'no_of_movies': count}
        for actor, count in rank_tokens(tokens, limit)
    ]
