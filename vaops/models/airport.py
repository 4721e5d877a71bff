"""
Airport model - reference data keyed by ICAO code.

Rows are created by the administrative import and are read-only for the
rest of the application.
"""

from typing import Optional

from sqlalchemy import Boolean, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from vaops.models.base import Base, TimestampMixin


class Airport(TimestampMixin, Base):
    """
    Airport reference record.

    Fields:
        id: ICAO code, uppercase (e.g., 'KSFO'); also the primary key
        icao: ICAO code (same as id)
        iata: 3-letter IATA code (e.g., 'SFO')
        hub: Primary base of operations for the airline
        lat/lon: WGS84 decimal degrees
    """

    __tablename__ = 'airports'

    id: Mapped[str] = mapped_column(
        String(5),
        primary_key=True,
        comment='ICAO code (uppercase)'
    )

    icao: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        unique=True,
        comment='ICAO code'
    )

    iata: Mapped[Optional[str]] = mapped_column(
        String(5),
        nullable=True,
        index=True,
        comment='IATA code'
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, default='')

    location: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment='City / region'
    )

    country: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    hub: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment='Primary base of operations'
    )

    lat: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment='Latitude in decimal degrees'
    )

    lon: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment='Longitude in decimal degrees'
    )

    __table_args__ = (
        Index('ix_airports_hub_icao', 'hub', 'icao'),
    )

    def __repr__(self) -> str:
        return f'<Airport {self.id} {self.name or "?"}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'icao': self.icao,
            'iata': self.iata,
            'name': self.name,
            'location': self.location,
            'country': self.country,
            'timezone': self.timezone,
            'hub': self.hub,
            'lat': self.lat,
            'lon': self.lon,
        }
