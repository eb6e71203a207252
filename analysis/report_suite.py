"""
Report suite - registry of the fifteen catalog reports and their runner.
Each report is computed independently; one failing report never aborts the rest.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ingestion.schema import CatalogRecord, CATALOG_COLUMNS
from analysis.report_config import ReportParameters
from analysis.calculations.distribution import (
    type_counts,
    top_rating_per_kind,
    top_countries,
    genre_counts,
    keyword_categories
)
from analysis.calculations.listings import (
    movies_released_in,
    longest_movies,
    recently_added,
    by_director,
    tv_shows_with_more_seasons,
    documentaries,
    missing_director
)
from analysis.calculations.country_share import yearly_country_share
from analysis.calculations.cast import actor_movie_count, top_actors_in_country

logger = logging.getLogger(__name__)

ReportFn = Callable[[Sequence[CatalogRecord], ReportParameters, date], List[Dict[str, Any]]]


class ReportSuiteError(Exception):
    """Raised when the suite is asked for a report it does not know."""
    pass


@dataclass(frozen=True)
class ReportSpec:
    """One registered report."""
    number: int
    name: str
    title: str
    columns: List[str]
    compute: ReportFn


FULL_ROW = list(CATALOG_COLUMNS)

_SPECS = [
    ReportSpec(1, 'type_counts', 'Movies and TV shows',
               ['kind', 'number_of_items'],
               lambda r, p, t: type_counts(r)),
    ReportSpec(2, 'top_rating_per_kind', 'Most common rating per type',
               ['kind', 'rating', 'rating_count'],
               lambda r, p, t: top_rating_per_kind(r)),
    ReportSpec(3, 'movies_released_in', 'Movies released in a given year',
               ['kind', 'title'],
               lambda r, p, t: movies_released_in(r, p.release_year)),
    ReportSpec(4, 'top_countries', 'Countries with the most content',
               ['country', 'total_content'],
               lambda r, p, t: top_countries(r, p.top_countries_limit)),
    ReportSpec(5, 'longest_movies', 'Longest movie',
               ['id', 'title', 'duration_minutes'],
               lambda r, p, t: longest_movies(r)),
    ReportSpec(6, 'recently_added', 'Content added recently',
               FULL_ROW,
               lambda r, p, t: recently_added(r, t, p.recent_years)),
    ReportSpec(7, 'by_director', 'Content by director',
               FULL_ROW,
               lambda r, p, t: by_director(r, p.director)),
    ReportSpec(8, 'tv_shows_with_more_seasons', 'TV shows with many seasons',
               FULL_ROW + ['no_of_seasons'],
               lambda r, p, t: tv_shows_with_more_seasons(r, p.season_threshold)),
    ReportSpec(9, 'genre_counts', 'Content per genre',
               ['genre', 'content_count'],
               lambda r, p, t: genre_counts(r)),
    ReportSpec(10, 'yearly_country_share', 'Yearly share of country content',
               ['year', 'total_content', 'percent_count'],
               lambda r, p, t: yearly_country_share(r, p.share_country, p.share_limit)),
    ReportSpec(11, 'documentaries', 'Documentaries',
               FULL_ROW,
               lambda r, p, t: documentaries(r, p.documentary_genre)),
    ReportSpec(12, 'missing_director', 'Content without a director',
               FULL_ROW,
               lambda r, p, t: missing_director(r)),
    ReportSpec(13, 'actor_movie_count', 'Actor appearances in recent movies',
               ['actor', 'movies_appeared'],
               lambda r, p, t: [{
                   'actor': p.actor,
                   'movies_appeared': actor_movie_count(r, p.actor, t, p.actor_window_years)
               }]),
    ReportSpec(14, 'top_actors_in_country', 'Top actors in a country',
               ['actor', 'no_of_movies'],
               lambda r, p, t: top_actors_in_country(r, p.actor_country, p.top_actors_limit)),
    ReportSpec(15, 'keyword_categories', 'Content categorized by description keywords',
               ['category', 'category_count'],
               lambda r, p, t: keyword_categories(r, p.bad_keywords)),
]

REPORT_REGISTRY: Dict[str, ReportSpec] = {spec.name: spec for spec in _SPECS}


def run_report(
    name: str,
    records: Sequence[CatalogRecord],
    params: ReportParameters,
    today: date
) -> Dict[str, Any]:
    """
    Run one report and capture its outcome.

    Args:
        name: Registered report name
        records: Catalog records (read-only)
        params: Report parameters
        today: Reference date for date-window reports

    Returns:
        Dictionary with status, rows and timing; failures carry error_message

    Raises:
        ReportSuiteError: If the report name is not registered
    """
    spec = REPORT_REGISTRY.get(name)
    if spec is None:
        raise ReportSuiteError(f"Unknown report: {name}")

    start_time = datetime.now()
    result = {
        'number': spec.number,
        'name': spec.name,
        'title': spec.title,
        'columns': list(spec.columns),
        'status': 'running',
        'rows': [],
        'row_count': 0,
        'error_message': None
    }

    try:
        rows = spec.compute(records, params, today)
        result['rows'] = rows
        result['row_count'] = len(rows)
        result['status'] = 'completed'
    except Exception as e:
        logger.warning(f"Report {spec.number} ({spec.name}) failed: {e}")
        result['status'] = 'failed'
        result['error_message'] = f"{type(e).__name__}: {e}"

    result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
    return result


def run_report_suite(
    records: Sequence[CatalogRecord],
    params: Optional[ReportParameters] = None,
    today: Optional[date] = None,
    only: Optional[List[str]] = None,
    max_workers: int = 1
) -> Dict[str, Dict[str, Any]]:
    """
    Run every registered report (or a subset) over the same records.

    Reports only read the shared records, so with max_workers > 1 they are
    evaluated on a thread pool. Results are always returned in registry order.

    Args:
        records: Catalog records
        params: Report parameters (defaults to ReportParameters())
        today: Reference date (defaults to today)
        only: Report names to run (default: all)
        max_workers: Worker threads (1 = sequential)

    Returns:
        Dictionary mapping report name to its result, in registry order

    Raises:
        ReportSuiteError: If only names an unknown report or max_workers < 1
    """
    if params is None:
        params = ReportParameters()
    if today is None:
        today = date.today()
    if max_workers < 1:
        raise ReportSuiteError(f"max_workers must be >= 1, got {max_workers}")

    if only is None:
        names = list(REPORT_REGISTRY)
    else:
        unknown = [n for n in only if n not in REPORT_REGISTRY]
        if unknown:
            raise ReportSuiteError(f"Unknown reports: {', '.join(unknown)}")
        names = [n for n in REPORT_REGISTRY if n in only]

    # Freeze the collection so no report can mutate it
    frozen = tuple(records)

    if max_workers == 1:
        results = [run_report(name, frozen, params, today) for name in names]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(run_report, name, frozen, params, today) for name in names]
            results = [future.result() for future in futures]

    failed = [r['name'] for r in results if r['status'] == 'failed']
    logger.info(f"Ran {len(results)} reports over {len(frozen)} records ({len(failed)} failed)")

    return {result['name']: result for result in results}
