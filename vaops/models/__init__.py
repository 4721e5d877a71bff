"""
Database models for vaops.

Relational schema for the airline's reference and operational data:
1. Airports (reference data, imported)
2. Ranks, subfleets and fares (fleet configuration)
3. Aircraft (airframes, with derived flight time)
4. PIREPs (flight reports feeding aircraft statistics)
"""

from vaops.models.base import Base, engine, SessionLocal, init_db
from vaops.models.airport import Airport
from vaops.models.fleet import Rank, Fare, Subfleet, subfleet_rank, subfleet_fare
from vaops.models.aircraft import Aircraft, AircraftState, AircraftStatus
from vaops.models.pirep import Pirep, PirepState

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'init_db',
    'Airport',
    'Rank',
    'Fare',
    'Subfleet',
    'subfleet_rank',
    'subfleet_fare',
    'Aircraft',
    'AircraftState',
    'AircraftStatus',
    'Pirep',
    'PirepState',
]
