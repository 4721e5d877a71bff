import os

# Keep the module-level engine away from any real database file
os.environ.setdefault('DATABASE_URL', 'sqlite://')

from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vaops.app import create_app
from vaops.models import (
    Aircraft,
    AircraftState,
    AircraftStatus,
    Airport,
    Base,
    Fare,
    Pirep,
    PirepState,
    Rank,
    Subfleet,
)
from vaops.services import AirportLookupClient


def make_airport(icao, lat, lon, hub=False, **kwargs):
    return Airport(
        id=icao,
        icao=icao,
        name=kwargs.pop('name', icao),
        lat=lat,
        lon=lon,
        hub=hub,
        **kwargs
    )


def make_pirep(aircraft_id, flight_time, state=PirepState.ACCEPTED, created_at=None):
    return Pirep(
        aircraft_id=aircraft_id,
        flight_time=flight_time,
        state=state.value,
        created_at=created_at or datetime(2024, 1, 1),
    )


@pytest.fixture
def engine():
    """In-memory SQLite shared across sessions."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def airports(session_factory):
    """A handful of airports; KSFO and KJFK are hubs."""
    with session_factory() as session:
        session.add_all([
            make_airport('KSFO', 37.6189, -122.3750, hub=True, iata='SFO',
                         name='San Francisco Intl', country='US'),
            make_airport('KJFK', 40.6398, -73.7789, hub=True, iata='JFK',
                         name='John F Kennedy Intl', country='US'),
            make_airport('KLAX', 33.9425, -118.4081, iata='LAX',
                         name='Los Angeles Intl', country='US'),
            make_airport('KSJC', 37.3626, -121.9291, iata='SJC',
                         name='San Jose Intl', country='US'),
            make_airport('EGLL', 51.4706, -0.461941, iata='LHR',
                         name='London Heathrow', country='GB'),
        ])
        session.commit()


@pytest.fixture
def fleet(session_factory, airports):
    """
    Ranks, fares, subfleets and aircraft.

    B738 may be flown by first officers and captains, C172 by everyone,
    B77W by captains only. N999 is soft-deleted.
    """
    with session_factory() as session:
        cadet = Rank(name='Cadet', hours=0)
        first_officer = Rank(name='First Officer', hours=50)
        captain = Rank(name='Captain', hours=500)
        trainee = Rank(name='Trainee', hours=10, auto_promote=False)

        economy = Fare(code='Y', name='Economy', price=100, capacity=150)
        business = Fare(code='J', name='Business', price=500, capacity=12)

        b738 = Subfleet(type='B738', name='737-800',
                        ranks=[first_officer, captain], fares=[economy, business])
        c172 = Subfleet(type='C172', name='Skyhawk',
                        ranks=[cadet, first_officer, captain], fares=[economy])
        b77w = Subfleet(type='B77W', name='777-300ER', ranks=[captain], fares=[economy, business])

        aircraft = {
            'N101': Aircraft(registration='N101', icao='B738', subfleet=b738, airport_id='KSFO',
                             state=AircraftState.PARKED.value, status=AircraftStatus.ACTIVE.value),
            'N102': Aircraft(registration='N102', icao='B738', subfleet=b738, airport_id='KSFO',
                             state=AircraftState.IN_AIR.value, status=AircraftStatus.ACTIVE.value),
            'N201': Aircraft(registration='N201', icao='C172', subfleet=c172, airport_id='KSFO',
                             state=AircraftState.PARKED.value, status=AircraftStatus.ACTIVE.value),
            'N301': Aircraft(registration='N301', icao='B77W', subfleet=b77w, airport_id='KSFO',
                             state=AircraftState.PARKED.value, status=AircraftStatus.STORED.value),
            'N103': Aircraft(registration='N103', icao='B738', subfleet=b738, airport_id='KJFK',
                             state=AircraftState.PARKED.value, status=AircraftStatus.ACTIVE.value),
            'N999': Aircraft(registration='N999', icao='B738', subfleet=b738, airport_id='KSFO',
                             state=AircraftState.PARKED.value, status=AircraftStatus.ACTIVE.value,
                             flight_time=777, deleted_at=datetime(2024, 6, 1)),
        }

        session.add_all([trainee, *aircraft.values()])
        session.commit()

        return SimpleNamespace(
            cadet=cadet.id,
            first_officer=first_officer.id,
            captain=captain.id,
            trainee=trainee.id,
            aircraft={reg: a.id for reg, a in aircraft.items()},
        )


@pytest.fixture
def pireps(session_factory, fleet):
    """
    N101: accepted 60, 90, 45 plus a rejected 1000.
    N102: seven accepted, two rejected, one submitted, one hour apart.
    """
    n101 = fleet.aircraft['N101']
    n102 = fleet.aircraft['N102']
    base = datetime(2024, 3, 1, 12, 0)

    records = [
        make_pirep(n101, 60),
        make_pirep(n101, 90),
        make_pirep(n101, 45),
        make_pirep(n101, 1000, PirepState.REJECTED),
    ]
    states = [PirepState.ACCEPTED] * 7 + [PirepState.REJECTED] * 2 + [PirepState.SUBMITTED]
    for i, state in enumerate(states):
        records.append(make_pirep(n102, 30 + i, state, created_at=base + timedelta(hours=i)))

    with session_factory() as session:
        session.add_all(records)
        session.commit()
    return records


@pytest.fixture
def lookup_client():
    """External directory that knows nothing unless a test says otherwise."""
    client = MagicMock(spec=AirportLookupClient)
    client.get_airport.return_value = None
    client.stats = {'cache_size': 0, 'configured': False}
    return client


@pytest.fixture
def app(session_factory, lookup_client):
    app = create_app(session_factory=session_factory, lookup_client=lookup_client)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def broken_session_factory():
    """Session factory for a database that is down."""
    return MagicMock(side_effect=OperationalError('SELECT 1', {}, Exception('database is locked')))
