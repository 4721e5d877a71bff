"""
Data ingestion module for vaops.

Loads administrative reference data (airports) into the relational database.
"""

from vaops.ingestion.airport_import import load_airports_csv, parse_airport_row

__all__ = ['load_airports_csv', 'parse_airport_row']
