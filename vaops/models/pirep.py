"""
PIREP (pilot report) model.

A PIREP records a flown leg and its actual flight time. It goes through an
approval workflow; only accepted reports count towards aircraft statistics
and show up in an aircraft's flight history.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vaops.models.base import Base, TimestampMixin


class PirepState(str, Enum):
    """Approval workflow state."""
    SUBMITTED = 'submitted'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'


class Pirep(TimestampMixin, Base):
    """Flight report filed by a pilot."""

    __tablename__ = 'pireps'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    aircraft_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey('aircraft.id', ondelete='SET NULL'),
        nullable=True,
    )

    flight_number: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    dpt_airport_id: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    arr_airport_id: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)

    flight_time: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment='Actual flight time in minutes'
    )

    state: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=PirepState.SUBMITTED.value,
        comment='Approval state'
    )

    aircraft: Mapped[Optional['Aircraft']] = relationship(back_populates='pireps')  # noqa: F821

    __table_args__ = (
        # Per-aircraft sums and history lookups
        Index('ix_pireps_aircraft_state_created', 'aircraft_id', 'state', 'created_at'),
    )

    def __repr__(self) -> str:
        return f'<Pirep {self.id} aircraft={self.aircraft_id} {self.state}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'aircraft_id': self.aircraft_id,
            'flight_number': self.flight_number,
            'dpt_airport_id': self.dpt_airport_id,
            'arr_airport_id': self.arr_airport_id,
            'flight_time': self.flight_time,
            'state': self.state,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
