"""
Application services.

Query and computation logic sitting between the API layer and the ORM.
Each service takes its session factory (and external clients) as
constructor arguments.
"""

from vaops.services.airport_lookup import AirportLookupClient, AirportRecord
from vaops.services.airports import AirportDirectory, AirportService, ResolvedAirport
from vaops.services.fleet import FleetService, FlightHistoryReader
from vaops.services.pagination import Page
from vaops.services.ranks import RankService

__all__ = [
    'AirportLookupClient',
    'AirportRecord',
    'AirportDirectory',
    'AirportService',
    'ResolvedAirport',
    'FleetService',
    'FlightHistoryReader',
    'Page',
    'RankService',
]
