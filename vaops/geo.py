"""
Great-circle geodesy helpers.

Distances are computed on a spherical Earth using the haversine formula
and carried around in metres; `Distance` converts on demand.
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6371008.8  # IUGG mean radius

METRES_PER_KM = 1000.0
METRES_PER_MILE = 1609.344
METRES_PER_NM = 1852.0


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points in metres.

    Uses the Haversine formula, which stays numerically stable for
    short distances as well as antipodal ones.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


@dataclass(frozen=True)
class Distance:
    """A distance, stored in metres."""
    metres: float

    @property
    def m(self) -> float:
        return self.metres

    @property
    def km(self) -> float:
        return self.metres / METRES_PER_KM

    @property
    def mi(self) -> float:
        return self.metres / METRES_PER_MILE

    @property
    def nmi(self) -> float:
        return self.metres / METRES_PER_NM

    @classmethod
    def between(cls, lat1: float, lon1: float, lat2: float, lon2: float) -> 'Distance':
        return cls(haversine_distance(lat1, lon1, lat2, lon2))

    def to_dict(self, precision: int = 2) -> dict:
        """All units, rounded for API responses."""
        return {
            'm': round(self.m, precision),
            'km': round(self.km, precision),
            'mi': round(self.mi, precision),
            'nmi': round(self.nmi, precision),
        }
