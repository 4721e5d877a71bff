"""
Airport queries and great-circle distances.

The directory resolves codes from the local airports table first and only
asks the external lookup service for codes we don't have.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from vaops.errors import NotFoundError, ValidationError, persistence_errors
from vaops.geo import Distance
from vaops.models import Airport
from vaops.models.base import SessionFactory, SessionLocal
from vaops.services.airport_lookup import AirportLookupClient, AirportRecord
from vaops.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

# Columns clients may sort listings by
SORTABLE_COLUMNS = {
    'id': Airport.id,
    'icao': Airport.icao,
    'iata': Airport.iata,
    'name': Airport.name,
    'location': Airport.location,
    'country': Airport.country,
}

MIN_SEARCH_LENGTH = 2

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def normalize_code(code: Optional[str]) -> str:
    """Airport codes are stored uppercase."""
    return (code or '').strip().upper()


def parse_bool(value, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValidationError(f'{name} must be a boolean, got {value!r}')


@dataclass
class ResolvedAirport:
    """Coordinates for a code, plus whatever else the source knew."""
    icao: str
    lat: float
    lon: float
    source: str  # 'local' or 'lookup'
    metadata: Dict[str, Any] = field(default_factory=dict)


class AirportDirectory:
    """
    Resolves airport codes to coordinates.

    Local table first, then the external lookup service.
    """

    def __init__(
        self,
        session_factory: SessionFactory = SessionLocal,
        lookup_client: Optional[AirportLookupClient] = None,
    ):
        self.session_factory = session_factory
        self.lookup_client = lookup_client

    def resolve(self, code: str) -> ResolvedAirport:
        """
        Resolve a code to coordinates.

        Raises:
            NotFoundError naming the code if nobody knows it
        """
        icao = normalize_code(code)
        if not icao:
            raise NotFoundError('airport', code)

        with persistence_errors(f'resolve airport {icao}'), self.session_factory() as session:
            airport = session.get(Airport, icao)
            if airport is not None:
                return ResolvedAirport(
                    icao=airport.id,
                    lat=airport.lat,
                    lon=airport.lon,
                    source='local',
                    metadata=airport.to_dict(),
                )

        record = self.lookup(icao)
        return ResolvedAirport(
            icao=record.icao,
            lat=record.lat,
            lon=record.lon,
            source='lookup',
            metadata=record.to_dict(),
        )

    def lookup(self, code: str) -> AirportRecord:
        """External lookup only. Raises NotFoundError on a miss."""
        icao = normalize_code(code)
        record = None
        if self.lookup_client is not None and icao:
            record = self.lookup_client.get_airport(icao)
        if record is None:
            raise NotFoundError('airport', icao or code)
        return record


class AirportService:
    """Read-side operations on airports."""

    def __init__(
        self,
        session_factory: SessionFactory = SessionLocal,
        directory: Optional[AirportDirectory] = None,
    ):
        self.session_factory = session_factory
        self.directory = directory or AirportDirectory(session_factory)

    def list_airports(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort_key: str = 'icao',
        sort_dir: str = 'asc',
        page=None,
        per_page=None,
    ) -> Page:
        """
        Paginated listing.

        Recognised filters:
        - hub: restrict to (non-)hub airports
        """
        filters = filters or {}
        column = SORTABLE_COLUMNS.get(sort_key)
        if column is None:
            raise ValidationError(
                f'Cannot sort by {sort_key!r}; expected one of {", ".join(sorted(SORTABLE_COLUMNS))}'
            )
        sort_dir = (sort_dir or 'asc').lower()
        if sort_dir not in ('asc', 'desc'):
            raise ValidationError(f'Sort direction must be asc or desc, got {sort_dir!r}')

        stmt = select(Airport)
        if filters.get('hub') not in (None, ''):
            stmt = stmt.where(Airport.hub == parse_bool(filters['hub'], 'hub'))

        order = column.asc() if sort_dir == 'asc' else column.desc()
        # Code as tiebreaker keeps pages stable
        stmt = stmt.order_by(order, Airport.id.asc())

        with persistence_errors('list airports'), self.session_factory() as session:
            return paginate(session, stmt, page, per_page)

    def list_hubs(self, page=None, per_page=None) -> Page:
        return self.list_airports({'hub': True}, page=page, per_page=per_page)

    def get_airport(self, code: str) -> Airport:
        """Exact lookup by code (case-insensitive)."""
        icao = normalize_code(code)
        with persistence_errors(f'load airport {icao}'), self.session_factory() as session:
            airport = session.get(Airport, icao)
        if airport is None:
            raise NotFoundError('airport', icao)
        return airport

    def search_airports(self, term: Optional[str]) -> List[Airport]:
        """
        Case-insensitive substring search on the code.

        The term is stripped first, so surrounding whitespace never counts
        toward the two-character minimum; shorter terms return nothing
        without touching the database.
        """
        term = (term or '').strip()
        if len(term) < MIN_SEARCH_LENGTH:
            return []

        stmt = (
            select(Airport)
            .where(func.upper(Airport.icao).contains(term.upper(), autoescape=True))
            .order_by(Airport.icao.asc())
        )
        with persistence_errors('search airports'), self.session_factory() as session:
            return list(session.execute(stmt).scalars().all())

    def lookup_airport(self, code: str) -> AirportRecord:
        """Ask the external directory about a code."""
        return self.directory.lookup(code)

    def calculate_distance(self, from_code: str, to_code: str) -> Distance:
        """
        Great-circle distance between two airports.

        Raises:
            NotFoundError naming whichever code failed to resolve
        """
        origin = self.directory.resolve(from_code)
        destination = self.directory.resolve(to_code)

        distance = Distance.between(origin.lat, origin.lon, destination.lat, destination.lon)
        logger.debug(f'Distance {origin.icao}->{destination.icao}: {distance.nmi:.1f}nm')
        return distance
