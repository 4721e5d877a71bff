"""
Fleet queries: aircraft at an airport, single aircraft, flight history.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from vaops.config import config
from vaops.errors import NotFoundError, ValidationError, persistence_errors
from vaops.models import Aircraft, AircraftState, AircraftStatus, Pirep, PirepState, Rank, Subfleet
from vaops.models.base import SessionFactory, SessionLocal
from vaops.services.airports import normalize_code

logger = logging.getLogger(__name__)


def _enum_value(enum_cls, value, name: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(f'Invalid {name} {value!r}; expected one of {allowed}') from None


def _int_value(value, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer, got {value!r}') from None


def _with_fleet_detail(stmt):
    # Subfleet, its fares and eligible ranks come back with each aircraft
    return stmt.options(
        selectinload(Aircraft.subfleet).selectinload(Subfleet.fares),
        selectinload(Aircraft.subfleet).selectinload(Subfleet.ranks),
    )


class FleetService:
    """Aircraft lookups for fleet and dispatch screens."""

    def __init__(self, session_factory: SessionFactory = SessionLocal):
        self.session_factory = session_factory

    def aircraft_at(
        self,
        airport_id: str,
        state: Optional[str] = None,
        status: Optional[str] = None,
        rank: Optional[int] = None,
    ) -> List[Aircraft]:
        """
        Aircraft currently at an airport.

        Optional filters:
        - state: AircraftState value
        - status: AircraftStatus code
        - rank: only aircraft whose subfleet this rank may fly
        """
        stmt = _with_fleet_detail(
            select(Aircraft)
            .where(Aircraft.airport_id == normalize_code(airport_id))
            .where(Aircraft.deleted_at.is_(None))
        )

        if state not in (None, ''):
            stmt = stmt.where(Aircraft.state == _enum_value(AircraftState, state, 'state'))
        if status not in (None, ''):
            stmt = stmt.where(Aircraft.status == _enum_value(AircraftStatus, status, 'status'))
        if rank not in (None, ''):
            rank_id = _int_value(rank, 'rank')
            stmt = stmt.where(Aircraft.subfleet.has(Subfleet.ranks.any(Rank.id == rank_id)))

        stmt = stmt.order_by(Aircraft.registration.asc(), Aircraft.id.asc())

        with persistence_errors(f'list aircraft at {airport_id}'), self.session_factory() as session:
            return list(session.execute(stmt).scalars().all())

    def get_aircraft(self, aircraft_id) -> Aircraft:
        """Single aircraft with fleet detail. Soft-deleted aircraft are not found."""
        aircraft_id = _int_value(aircraft_id, 'aircraft id')
        stmt = _with_fleet_detail(
            select(Aircraft)
            .where(Aircraft.id == aircraft_id)
            .where(Aircraft.deleted_at.is_(None))
        )
        with persistence_errors(f'load aircraft {aircraft_id}'), self.session_factory() as session:
            aircraft = session.execute(stmt).scalars().first()
        if aircraft is None:
            raise NotFoundError('aircraft', aircraft_id)
        return aircraft


class FlightHistoryReader:
    """Recent accepted PIREPs for an aircraft."""

    def __init__(self, session_factory: SessionFactory = SessionLocal):
        self.session_factory = session_factory

    def history(self, aircraft_id, limit: int = config.stats.history_limit) -> List[Pirep]:
        """
        Most recent accepted PIREPs first, at most `limit` of them.
        """
        if isinstance(aircraft_id, Aircraft):
            aircraft_id = aircraft_id.id
        limit = _int_value(limit, 'limit')
        if limit < 1:
            raise ValidationError('limit must be >= 1')

        stmt = (
            select(Pirep)
            .where(Pirep.aircraft_id == aircraft_id)
            .where(Pirep.state == PirepState.ACCEPTED.value)
            .order_by(Pirep.created_at.desc(), Pirep.id.desc())
            .limit(limit)
        )
        with persistence_errors(f'load history for {aircraft_id}'), self.session_factory() as session:
            return list(session.execute(stmt).scalars().all())
