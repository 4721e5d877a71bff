"""
Administrative airport import.

Loads airport reference data from CSV into the airports table, updating
rows that already exist.

Expected CSV header (extra columns are ignored):
icao,iata,name,location,country,timezone,hub,lat,lon

Usage:
    from vaops.ingestion.airport_import import load_airports_csv

    loaded = load_airports_csv(Path('airports.csv'))
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from vaops.models import Airport
from vaops.models.base import SessionFactory, SessionLocal

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    'sqlite': sqlite_insert,
    'postgresql': postgresql_insert,
}

_UPDATE_COLUMNS = ('icao', 'iata', 'name', 'location', 'country', 'timezone', 'hub', 'lat', 'lon')

_TRUE_VALUES = ('1', 'true', 'yes', 'y', 't')


def parse_airport_row(row: Dict[str, str]) -> Optional[dict]:
    """
    Turn one CSV row into column values.

    Returns None for rows without a code or with unusable coordinates.
    """
    icao = (row.get('icao') or row.get('id') or '').strip().upper()
    if not icao or len(icao) > 5:
        return None

    try:
        lat = float((row.get('lat') or row.get('latitude') or '').strip())
        lon = float((row.get('lon') or row.get('longitude') or '').strip())
    except ValueError:
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None

    return {
        'id': icao,
        'icao': icao,
        'iata': (row.get('iata') or '').strip().upper() or None,
        'name': (row.get('name') or '').strip(),
        'location': (row.get('location') or '').strip() or None,
        'country': (row.get('country') or '').strip() or None,
        'timezone': (row.get('timezone') or '').strip() or None,
        'hub': (row.get('hub') or '').strip().lower() in _TRUE_VALUES,
        'lat': lat,
        'lon': lon,
    }


def load_airports_csv(
    csv_path: Path,
    batch_size: int = 500,
    session_factory: SessionFactory = SessionLocal,
) -> int:
    """
    Load airport data from CSV into database.

    Returns count of records loaded.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        logger.error(f'Airport CSV not found: {csv_path}')
        return 0

    logger.info(f'Loading airport data from {csv_path}')
    loaded = 0
    skipped = 0
    batch: List[dict] = []

    with open(csv_path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)

        for row in reader:
            record = parse_airport_row(row)
            if record is None:
                skipped += 1
                continue

            batch.append(record)

            if len(batch) >= batch_size:
                _upsert_batch(batch, session_factory)
                loaded += len(batch)
                logger.info(f'Loaded {loaded} airport records...')
                batch = []

        # Insert remaining
        if batch:
            _upsert_batch(batch, session_factory)
            loaded += len(batch)

    if skipped:
        logger.warning(f'Skipped {skipped} airport rows without a code or valid coordinates')
    logger.info(f'Loaded {loaded} total airport records')
    return loaded


def _upsert_batch(records: List[dict], session_factory: SessionFactory) -> None:
    """Batch insert/upsert airport records."""
    with session_factory() as session:
        insert = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
        if insert is None:
            # Dialects without ON CONFLICT support go through the ORM
            for record in records:
                session.merge(Airport(**record))
        else:
            for record in records:
                stmt = insert(Airport).values(**record)
                stmt = stmt.on_conflict_do_update(
                    index_elements=['id'],
                    set_={column: stmt.excluded[column] for column in _UPDATE_COLUMNS},
                )
                session.execute(stmt)
        session.commit()
