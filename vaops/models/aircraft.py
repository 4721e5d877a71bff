"""
Aircraft model - individual airframes in the airline's fleet.

Each aircraft belongs to a subfleet and sits at an airport. Its cumulative
flight time is derived data, rewritten by the statistics recalculation job.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vaops.models.base import Base, TimestampMixin


class AircraftState(str, Enum):
    """Operational state - where the aircraft is in its flying cycle."""
    PARKED = 'parked'
    IN_USE = 'in_use'
    IN_AIR = 'in_air'


class AircraftStatus(str, Enum):
    """
    Administrative status.

    Single-letter codes are what gets stored and passed in query strings:
    - A: active, available for flights
    - S: stored
    - R: retired
    - C: scrapped
    - W: written off
    """
    ACTIVE = 'A'
    STORED = 'S'
    RETIRED = 'R'
    SCRAPPED = 'C'
    WRITTEN_OFF = 'W'


class Aircraft(TimestampMixin, Base):
    """
    Airframe record.

    Fields:
        registration: Tail number (e.g., 'N12345')
        icao: ICAO type designator (e.g., 'B738')
        airport_id: Current location (ICAO code)
        flight_time: Cumulative minutes flown, recalculated from PIREPs
        deleted_at: Soft-delete marker; deleted aircraft are hidden from queries
    """

    __tablename__ = 'aircraft'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    subfleet_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey('subfleets.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )

    airport_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey('airports.id', ondelete='SET NULL'),
        nullable=True,
        comment='Current location (ICAO)'
    )

    icao: Mapped[Optional[str]] = mapped_column(
        String(4),
        nullable=True,
        comment='ICAO type designator (e.g., B738)'
    )

    registration: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        index=True,
        comment='Aircraft registration (tail number)'
    )

    name: Mapped[str] = mapped_column(String(50), nullable=False, default='')

    state: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=AircraftState.PARKED.value,
        comment='Operational state'
    )

    status: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        default=AircraftStatus.ACTIVE.value,
        comment='Administrative status code'
    )

    flight_time: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment='Cumulative flight time in minutes'
    )

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True,
        comment='Soft-delete timestamp'
    )

    subfleet: Mapped[Optional['Subfleet']] = relationship(back_populates='aircraft')  # noqa: F821
    pireps: Mapped[List['Pirep']] = relationship(back_populates='aircraft')  # noqa: F821

    __table_args__ = (
        # Fleet-at-airport query
        Index('ix_aircraft_airport_state_status', 'airport_id', 'state', 'status'),
    )

    def __repr__(self) -> str:
        return f'<Aircraft {self.id} {self.registration or "?"} {self.icao or "?"}>'

    @property
    def flight_hours(self) -> float:
        """Flight time in decimal hours."""
        return round((self.flight_time or 0) / 60.0, 2)

    def to_dict(self, include_subfleet: bool = False) -> dict:
        data = {
            'id': self.id,
            'subfleet_id': self.subfleet_id,
            'airport_id': self.airport_id,
            'icao': self.icao,
            'registration': self.registration,
            'name': self.name,
            'state': self.state,
            'status': self.status,
            'flight_time': self.flight_time,
        }
        if include_subfleet:
            data['subfleet'] = self.subfleet.to_dict() if self.subfleet else None
        return data
