"""
Report configuration - per-report parameters from YAML with .env overrides.
"""

import os
import logging
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = './data/catalog.db'
DEFAULT_CONFIG_PATH = './config/reports.yml'
DEFAULT_OUTPUT_DIR = './data/processed/reports'


class ReportConfigError(Exception):
    """Raised when report configuration is invalid or cannot be loaded."""
    pass


@dataclass
class ReportParameters:
    """Parameters for the fifteen catalog reports."""
    release_year: int = 2020
    top_countries_limit: int = 5
    recent_years: int = 5
    director: str = 'Rajiv Chilaka'
    season_threshold: int = 5
    share_country: str = 'India'
    share_limit: int = 5
    documentary_genre: str = 'Documentaries'
    actor: str = 'Salman Khan'
    actor_window_years: int = 10
    actor_country: str = 'India'
    top_actors_limit: int = 10
    bad_keywords: Tuple[str, ...] = field(
        default_factory=lambda: ('kill', 'violence', 'violent', 'killed')
    )

    def __post_init__(self):
        """Validate parameter types and ranges."""
        # A scalar YAML value is one keyword, not a sequence of letters
        if isinstance(self.bad_keywords, str):
            self.bad_keywords = (self.bad_keywords,)
        elif isinstance(self.bad_keywords, (list, tuple)):
            self.bad_keywords = tuple(self.bad_keywords)
        else:
            raise ReportConfigError(f"bad_keywords must be a list of strings, got {self.bad_keywords!r}")

        for name in ['release_year', 'top_countries_limit', 'recent_years', 'season_threshold',
                     'share_limit', 'actor_window_years', 'top_actors_limit']:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ReportConfigError(f"{name} must be integer, got {value!r}")
            if value < 0:
                raise ReportConfigError(f"{name} must be non-negative, got {value}")

        for name in ['director', 'share_country', 'documentary_genre', 'actor', 'actor_country']:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ReportConfigError(f"{name} must be non-empty string")

        if not self.bad_keywords or not all(isinstance(k, str) and k for k in self.bad_keywords):
            raise ReportConfigError("bad_keywords must be a non-empty list of strings")

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary (keywords as a list) for JSON output."""
        params = asdict(self)
        params['bad_keywords'] = list(self.bad_keywords)
        return params


def load_report_config(config_path: Optional[str] = None) -> ReportParameters:
    """
    Load report parameters from a YAML file.

    A missing file at the default location yields the built-in defaults;
    a missing file at an explicitly requested path is an error.

    Args:
        config_path: Path to the YAML file (default: $CATALOG_REPORT_CONFIG
            or ./config/reports.yml)

    Returns:
        ReportParameters

    Raises:
        ReportConfigError: If the file cannot be read or holds invalid values
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = os.getenv('CATALOG_REPORT_CONFIG', DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        if explicit:
            raise ReportConfigError(f"Report config file not found: {config_path}")
        logger.info(f"No report config at {config_path}, using defaults")
        return ReportParameters()

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ReportConfigError(f"Failed to load report config: {e}") from e

    if not isinstance(raw, dict):
        raise ReportConfigError("Report config must be a mapping")

    # Parameters may sit under a 'reports' section
    params = raw.get('reports', raw)
    if not isinstance(params, dict):
        raise ReportConfigError("Report config 'reports' section must be a mapping")

    known = {f.name for f in fields(ReportParameters)}
    unknown = set(params) - known
    if unknown:
        raise ReportConfigError(f"Unknown report parameters: {', '.join(sorted(unknown))}")

    return ReportParameters(**params)


def get_db_path() -> str:
    """SQLite catalog path from $CATALOG_DB_PATH."""
    return os.getenv('CATALOG_DB_PATH', DEFAULT_DB_PATH)


def get_output_dir() -> Path:
    """Report output directory from $CATALOG_OUTPUT_DIR."""
    return Path(os.getenv('CATALOG_OUTPUT_DIR', DEFAULT_OUTPUT_DIR))


def configure_logging() -> None:
    """Configure root logging from $CATALOG_LOG_LEVEL (default WARNING)."""
    level_name = os.getenv('CATALOG_LOG_LEVEL', 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
