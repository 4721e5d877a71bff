"""
vaops - virtual airline operations backend.

Airport reference data, fleet queries, pilot ranks and aircraft flight
statistics, built with Flask, SQLAlchemy, and NumPy.

Modules:
    api/         REST endpoints for airports, fleet, ranks and statistics
    models/      SQLAlchemy ORM models (Airport, Aircraft, Pirep, Rank, Subfleet, Fare)
    services/    Query services and the external airport lookup client
    analytics/   Flight-time recalculation and NumPy fleet summaries
    ingestion/   Administrative airport CSV import
    geo.py       Great-circle distance helpers
    errors.py    Error types mapped to HTTP status codes
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
