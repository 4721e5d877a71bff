"""
API module for vaops.

Provides REST endpoints for:
- Airports (listing, search, lookup, distance)
- Fleet (aircraft at airport, aircraft detail)
- Ranks
- Statistics and system status
"""

from vaops.api.airports import airports_bp
from vaops.api.fleet import fleet_bp
from vaops.api.ranks import ranks_bp
from vaops.api.stats import stats_bp

__all__ = ['airports_bp', 'fleet_bp', 'ranks_bp', 'stats_bp']
