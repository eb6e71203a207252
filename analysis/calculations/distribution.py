"""
Distribution reports - counts and rankings over the whole catalog.
Pure functions over a read-only list of CatalogRecord.
"""

from collections import Counter
from typing import Dict, Any, Iterable, List, Optional, Sequence

from ingestion.schema import CatalogRecord

BAD_KEYWORDS = ('kill', 'violence', 'violent', 'killed')


def type_counts(records: Sequence[CatalogRecord]) -> List[Dict[str, Any]]:
    """
    Count records per content kind.

    Args:
        records: Catalog records

    Returns:
        Rows {kind, number_of_items} sorted ascending by kind name
    """
    counts = Counter(record.kind.value for record in records)
    return [
        {'kind': kind, 'number_of_items': count}
        for kind, count in sorted(counts.items())
    ]


def top_rating_per_kind(records: Sequence[CatalogRecord]) -> List[Dict[str, Any]]:
    """
    Find the most common rating for each content kind.

    Every rating tied at the top count is returned (dense rank 1), so a kind
    can produce several rows. Records without a rating are not counted.

    Args:
        records: Catalog records

    Returns:
        Rows {kind, rating, rating_count} ordered by kind, then rating
    """
    counts_by_kind: Dict[str, Counter] = {}
    for record in records:
        if record.rating is None:
            continue
        counts_by_kind.setdefault(record.kind.value, Counter())[record.rating] += 1

    rows = []
    for kind in sorted(counts_by_kind):
        counts = counts_by_kind[kind]
        best = max(counts.values())
        for rating in sorted(r for r, c in counts.items() if c == best):
            rows.append({'kind': kind, 'rating': rating, 'rating_count': best})

    return rows


def rank_tokens(tokens: Iterable[str], limit: int) -> List[tuple]:
    """
    Count tokens and rank them by count descending, then name ascending.

    Args:
        tokens: Fanned-out tokens (one entry per contribution)
        limit: Maximum number of entries to keep

    Returns:
        List of (token, count) tuples, at most limit long
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    counts = Counter(tokens)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


def top_countries(records: Sequence[CatalogRecord], limit: int = 5) -> List[Dict[str, Any]]:
    """
    Rank countries by the amount of content tagged with them.

    A record listing N countries contributes one count to each.

    Args:
        records: Catalog records
        limit: Number of countries to return (default: 5)

    Returns:
        Rows {country, total_content}, highest count first
    """
    tokens = (country for record in records for country in record.countries)
    return [
        {'country': country, 'total_content': count}
        for country, count in rank_tokens(tokens, limit)
    ]


def genre_counts(records: Sequence[CatalogRecord]) -> List[Dict[str, Any]]:
    """
    Count content items per genre.

    Args:
        records: Catalog records

    Returns:
        Rows {genre, content_count} sorted ascending by genre name
    """
    counts = Counter(genre for record in records for genre in record.genre_list)
    return [
        {'genre': genre, 'content_count': count}
        for genre, count in sorted(counts.items())
    ]


def categorize_description(description: Optional[str], keywords: Sequence[str] = BAD_KEYWORDS) -> str:
    """Label a description 'Bad' if it mentions any keyword, else 'Good'."""
    if description is None:
        return 'Good'
    text = description.casefold()
    if any(keyword.casefold() in text for keyword in keywords):
        return 'Bad'
    return 'Good'


def keyword_categories(
    records: Sequence[CatalogRecord],
    keywords: Sequence[str] = BAD_KEYWORDS
) -> List[Dict[str, Any]]:
    """
    Categorize every record by keywords in its description and count each category.

    Total over the input: every record lands in exactly one category, and
    both categories are always reported.

    Args:
        records: Catalog records
        keywords: Case-insensitive substrings that mark content as 'Bad'

    Returns:
        Rows {category, category_count} for 'Bad' then 'Good'
    """
    counts = Counter(categorize_description(record.description, keywords) for record in records)
    return [
        {'category': category, 'category_count': counts.get(category, 0)}
        for category in ('Bad', 'Good')
    ]
