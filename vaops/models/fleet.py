"""
Fleet models: subfleets, the fares they carry, and the ranks allowed to fly them.

Rank eligibility is a many-to-many between Subfleet and Rank; an aircraft is
flyable by a rank when its subfleet lists that rank.
"""

from typing import List, Optional

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, SmallInteger, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vaops.models.base import Base, TimestampMixin


subfleet_rank = Table(
    'subfleet_rank',
    Base.metadata,
    Column('subfleet_id', ForeignKey('subfleets.id', ondelete='CASCADE'), primary_key=True),
    Column('rank_id', ForeignKey('ranks.id', ondelete='CASCADE'), primary_key=True),
)

subfleet_fare = Table(
    'subfleet_fare',
    Base.metadata,
    Column('subfleet_id', ForeignKey('subfleets.id', ondelete='CASCADE'), primary_key=True),
    Column('fare_id', ForeignKey('fares.id', ondelete='CASCADE'), primary_key=True),
)


class Rank(TimestampMixin, Base):
    """
    Pilot rank.

    `hours` is the flight-time threshold a pilot needs to hold the rank.
    Pay rates apply per flight hour, split by how the PIREP was filed
    (ACARS vs manual). The auto_* flags control PIREP auto-approval and
    automatic promotion for pilots holding this rank.
    """

    __tablename__ = 'ranks'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    image_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    hours: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment='Flight hours required to hold this rank'
    )

    acars_base_pay_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    manual_base_pay_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)

    auto_approve_acars: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=False)
    auto_approve_manual: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=False)
    auto_promote: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=True)
    auto_approve_above_score: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=False)
    auto_approve_score: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)

    subfleets: Mapped[List['Subfleet']] = relationship(
        secondary=subfleet_rank,
        back_populates='ranks',
    )

    def __repr__(self) -> str:
        return f'<Rank {self.id} {self.name} ({self.hours}h)>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'image_url': self.image_url,
            'hours': self.hours,
            'acars_base_pay_rate': self.acars_base_pay_rate,
            'manual_base_pay_rate': self.manual_base_pay_rate,
            'auto_approve_acars': self.auto_approve_acars,
            'auto_approve_manual': self.auto_approve_manual,
            'auto_promote': self.auto_promote,
            'auto_approve_above_score': self.auto_approve_above_score,
            'auto_approve_score': self.auto_approve_score,
        }


class Fare(TimestampMixin, Base):
    """Seat/cargo class offered on a subfleet (e.g., Y, J, F)."""

    __tablename__ = 'fares'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f'<Fare {self.code}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'code': self.code,
            'name': self.name,
            'price': self.price,
            'capacity': self.capacity,
        }


class Subfleet(TimestampMixin, Base):
    """Group of aircraft of one type (e.g., 'B738 Domestic')."""

    __tablename__ = 'subfleets'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment='Subfleet type code'
    )

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    ranks: Mapped[List[Rank]] = relationship(
        secondary=subfleet_rank,
        back_populates='subfleets',
    )

    fares: Mapped[List[Fare]] = relationship(secondary=subfleet_fare)

    aircraft: Mapped[List['Aircraft']] = relationship(back_populates='subfleet')  # noqa: F821

    def __repr__(self) -> str:
        return f'<Subfleet {self.type}>'

    def to_dict(self, include_relations: bool = True) -> dict:
        data = {
            'id': self.id,
            'type': self.type,
            'name': self.name,
        }
        if include_relations:
            data['fares'] = [f.to_dict() for f in self.fares]
            data['ranks'] = [{'id': r.id, 'name': r.name} for r in self.ranks]
        return data
