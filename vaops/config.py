"""
Configuration management for vaops.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    url: str = os.getenv('DATABASE_URL', 'sqlite:///vaops.db')

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')


@dataclass(frozen=True)
class AirportLookupConfig:
    """External airport directory (used for codes missing from the local table)."""
    base_url: str = os.getenv('AIRPORT_LOOKUP_URL', '')
    api_key: Optional[str] = os.getenv('AIRPORT_LOOKUP_API_KEY') or None
    timeout_seconds: float = float(os.getenv('AIRPORT_LOOKUP_TIMEOUT', '10'))
    cache_ttl_seconds: int = int(os.getenv('AIRPORT_LOOKUP_CACHE_TTL', '3600'))
    # Misses are cached too, so the cache is bounded
    cache_max_entries: int = int(os.getenv('AIRPORT_LOOKUP_CACHE_MAX', '500'))

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


@dataclass(frozen=True)
class PaginationConfig:
    """Listing defaults for paginated endpoints."""
    per_page: int = int(os.getenv('PER_PAGE', '50'))
    max_per_page: int = int(os.getenv('MAX_PER_PAGE', '200'))


@dataclass(frozen=True)
class StatsConfig:
    """Aircraft statistics settings."""
    # Aircraft per batch during recalculation
    page_size: int = int(os.getenv('STATS_PAGE_SIZE', '100'))
    history_limit: int = 5


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    database: DatabaseConfig
    airport_lookup: AirportLookupConfig
    pagination: PaginationConfig
    stats: StatsConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        database=DatabaseConfig(),
        airport_lookup=AirportLookupConfig(),
        pagination=PaginationConfig(),
        stats=StatsConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
