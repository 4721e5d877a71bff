"""
Analytics module for vaops.

- Aircraft flight-time recalculation from PIREPs (batch job)
- Fleet-wide utilisation summaries (NumPy)
"""

from vaops.analytics.aircraft_stats import (
    AircraftStatsAggregator,
    RecalculationResult,
)
from vaops.analytics.fleet_statistics import FleetStatistics

__all__ = [
    'AircraftStatsAggregator',
    'RecalculationResult',
    'FleetStatistics',
]
