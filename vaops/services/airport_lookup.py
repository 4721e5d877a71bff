"""
External airport directory client.

Resolves ICAO codes the local airports table doesn't know about, via a
REST lookup service:

    GET {base_url}/airports/{ICAO}  ->  {"icao": ..., "lat": ..., "lon": ..., ...}

Results (including misses) are cached per code to avoid hammering the
service from the distance and lookup endpoints.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import requests

from vaops.config import config
from vaops.errors import LookupServiceError

logger = logging.getLogger(__name__)


@dataclass
class AirportRecord:
    """Airport information as returned by the lookup service."""
    icao: str
    lat: float
    lon: float
    iata: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, icao: str, data: Dict[str, Any]) -> Optional['AirportRecord']:
        """
        Parse a lookup response body.

        Returns None when coordinates are missing or unparseable.
        """
        if not isinstance(data, dict):
            return None
        # Some providers wrap the payload
        if isinstance(data.get('data'), dict):
            data = data['data']

        try:
            lat = float(data.get('lat', data.get('latitude')))
            lon = float(data.get('lon', data.get('longitude')))
        except (TypeError, ValueError):
            return None

        return cls(
            icao=(data.get('icao') or icao).upper(),
            lat=lat,
            lon=lon,
            iata=data.get('iata'),
            name=data.get('name'),
            location=data.get('location') or data.get('city'),
            country=data.get('country'),
            timezone=data.get('timezone') or data.get('tz'),
            metadata=data,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.icao,
            'icao': self.icao,
            'iata': self.iata,
            'name': self.name,
            'location': self.location,
            'country': self.country,
            'timezone': self.timezone,
            'lat': self.lat,
            'lon': self.lon,
        }


class AirportLookupClient:
    """
    Client for the external airport lookup service.

    Handles:
    - GET requests to /airports/<icao>
    - Optional API key authentication
    - Per-code caching with TTL (misses are cached too), oldest entries
      evicted past cache_max_entries
    """

    def __init__(
        self,
        base_url: str = '',
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        cache_ttl: int = 3600,
        cache_max_entries: int = 500,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

        self.session = session or requests.Session()
        if api_key:
            self.session.headers['X-API-Key'] = api_key

        # Cache: icao -> (AirportRecord or None, timestamp)
        self._cache: Dict[str, Tuple[Optional[AirportRecord], float]] = {}
        self._cache_ttl = cache_ttl
        self._cache_max_entries = cache_max_entries
        self._lock = threading.RLock()

        if not self.base_url:
            logger.warning('Airport lookup URL not configured - external lookups disabled')

    @classmethod
    def from_config(cls) -> 'AirportLookupClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.airport_lookup.base_url,
            api_key=config.airport_lookup.api_key,
            timeout=config.airport_lookup.timeout_seconds,
            cache_ttl=config.airport_lookup.cache_ttl_seconds,
            cache_max_entries=config.airport_lookup.cache_max_entries,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    def get_airport(self, icao: str) -> Optional[AirportRecord]:
        """
        Look up an airport by ICAO code.

        Returns None if the service doesn't know the code (or isn't configured).

        Raises:
            LookupServiceError on network errors and non-404 HTTP errors
        """
        icao = icao.strip().upper()
        if not icao or not self.is_configured:
            return None

        with self._lock:
            if icao in self._cache:
                record, timestamp = self._cache[icao]
                if time.time() - timestamp < self._cache_ttl:
                    logger.debug(f'Airport lookup cache hit for {icao}')
                    return record
                del self._cache[icao]

        record = self._fetch(icao)
        self._set_cached(icao, record)
        return record

    def _set_cached(self, icao: str, record: Optional[AirportRecord]) -> None:
        with self._lock:
            self._cache.pop(icao, None)
            self._cache[icao] = (record, time.time())

            # Insertion order is age order; drop the oldest entries
            while len(self._cache) > self._cache_max_entries:
                del self._cache[next(iter(self._cache))]

    def _fetch(self, icao: str) -> Optional[AirportRecord]:
        url = f'{self.base_url}/airports/{icao}'
        logger.info(f'Looking up airport {icao} via {self.base_url}')

        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                logger.info(f'Airport {icao} unknown to lookup service')
                return None
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.Timeout as e:
            logger.error(f'Airport lookup timeout for {icao}')
            raise LookupServiceError(f'Airport lookup timed out for {icao}') from e
        except requests.exceptions.RequestException as e:
            logger.error(f'Airport lookup failed for {icao}: {e}')
            raise LookupServiceError(f'Airport lookup failed for {icao}') from e
        except ValueError as e:
            logger.error(f'Airport lookup returned invalid JSON for {icao}')
            raise LookupServiceError(f'Airport lookup returned invalid data for {icao}') from e

        record = AirportRecord.from_json(icao, data)
        if record is None:
            logger.warning(f'Airport lookup response for {icao} has no usable coordinates')
        return record

    def clear_cache(self) -> None:
        """Clear the lookup cache."""
        with self._lock:
            self._cache.clear()

    @property
    def stats(self) -> dict:
        """Get client statistics."""
        with self._lock:
            return {
                'cache_size': len(self._cache),
                'cache_max_entries': self._cache_max_entries,
                'configured': self.is_configured,
            }
