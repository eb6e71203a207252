"""
Catalog record schema - canonical column names and the immutable record type.
Pure definitions - no IO.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any, List, Optional


class ContentKind(str, Enum):
    """Enumeration of catalog content kinds (values match the source column)."""
    MOVIE = 'Movie'
    TV_SHOW = 'TV Show'


# Canonical column order (mirrors the catalog table)
CATALOG_COLUMNS = [
    'id', 'kind', 'title', 'director', 'cast', 'country', 'date_added',
    'release_year', 'rating', 'duration', 'genres', 'description'
]

OPTIONAL_COLUMNS = [
    'director', 'cast', 'country', 'date_added', 'rating', 'duration',
    'genres', 'description'
]

# Source header names accepted for each canonical column, in lookup order
SOURCE_COLUMN_ALIASES = {
    'id': ['show_id', 'id'],
    'kind': ['type', 'show_type', 'kind'],
    'title': ['title'],
    'director': ['director'],
    'cast': ['cast', 'casts'],
    'country': ['country'],
    'date_added': ['date_added'],
    'release_year': ['release_year'],
    'rating': ['rating'],
    'duration': ['duration'],
    'genres': ['listed_in', 'genres'],
    'description': ['description'],
}


def split_multi(text: Optional[str]) -> List[str]:
    """
    Split a comma-separated field into trimmed, non-empty tokens.

    Args:
        text: Raw multi-valued field (country, cast, genres)

    Returns:
        List of tokens in field order (empty if absent)
    """
    if not text:
        return []
    return [token.strip() for token in text.split(',') if token.strip()]


@dataclass(frozen=True)
class CatalogRecord:
    """One movie or TV show from the catalog."""
    id: str
    kind: ContentKind
    title: str
    director: Optional[str]
    cast: Optional[str]
    country: Optional[str]
    date_added: Optional[str]
    release_year: int
    rating: Optional[str]
    duration: Optional[str]
    genres: Optional[str]
    description: Optional[str]

    @property
    def countries(self) -> List[str]:
        """Country tokens, split on commas and trimmed."""
        return split_multi(self.country)

    @property
    def genre_list(self) -> List[str]:
        """Genre tokens, split on commas and trimmed."""
        return split_multi(self.genres)

    @property
    def cast_members(self) -> List[str]:
        """Performer names, split on commas and trimmed."""
        return split_multi(self.cast)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'CatalogRecord':
        """
        Build a record from a canonical row dictionary.

        Args:
            row: Canonical catalog row (see CATALOG_COLUMNS)

        Returns:
            CatalogRecord
        """
        values = {column: row.get(column) for column in CATALOG_COLUMNS}
        values['kind'] = ContentKind(row['kind'])
        values['release_year'] = int(row['release_year'])
        return cls(**values)

    def to_row(self) -> Dict[str, Any]:
        """Canonical row dictionary with the kind as its plain string value."""
        row = asdict(self)
        row['kind'] = self.kind.value
        return row
