"""Tests for fleet queries, flight history and ranks."""

import pytest

from vaops.errors import NotFoundError, PersistenceError, ValidationError
from vaops.models import Aircraft, PirepState
from vaops.services import FleetService, FlightHistoryReader, RankService


def registrations(aircraft):
    return sorted(a.registration for a in aircraft)


class TestAircraftAt:

    def test_all_aircraft_at_airport(self, session_factory, fleet):
        aircraft = FleetService(session_factory).aircraft_at('KSFO')
        # N999 is soft-deleted, N103 is at KJFK
        assert registrations(aircraft) == ['N101', 'N102', 'N201', 'N301']

    def test_airport_code_is_case_insensitive(self, session_factory, fleet):
        aircraft = FleetService(session_factory).aircraft_at('kjfk')
        assert registrations(aircraft) == ['N103']

    def test_unknown_airport_is_empty(self, session_factory, fleet):
        assert FleetService(session_factory).aircraft_at('ZZZZ') == []

    def test_state_filter(self, session_factory, fleet):
        aircraft = FleetService(session_factory).aircraft_at('KSFO', state='parked')
        assert registrations(aircraft) == ['N101', 'N201', 'N301']

    def test_status_filter(self, session_factory, fleet):
        aircraft = FleetService(session_factory).aircraft_at('KSFO', status='S')
        assert registrations(aircraft) == ['N301']

    def test_rank_filter_restricts_to_eligible_subfleets(self, session_factory, fleet):
        service = FleetService(session_factory)

        assert registrations(service.aircraft_at('KSFO', rank=fleet.cadet)) == ['N201']
        assert registrations(service.aircraft_at('KSFO', rank=str(fleet.first_officer))) == [
            'N101', 'N102', 'N201',
        ]
        assert registrations(service.aircraft_at('KSFO', rank=fleet.captain)) == [
            'N101', 'N102', 'N201', 'N301',
        ]

    def test_rank_without_subfleets(self, session_factory, fleet):
        assert FleetService(session_factory).aircraft_at('KSFO', rank=fleet.trainee) == []

    def test_filters_combine(self, session_factory, fleet):
        aircraft = FleetService(session_factory).aircraft_at(
            'KSFO', state='parked', status='A', rank=fleet.captain
        )
        assert registrations(aircraft) == ['N101', 'N201']

    @pytest.mark.parametrize('kwargs', [
        {'state': 'flying'},
        {'status': 'B'},
        {'rank': 'captain'},
    ])
    def test_invalid_filters(self, session_factory, fleet, kwargs):
        with pytest.raises(ValidationError):
            FleetService(session_factory).aircraft_at('KSFO', **kwargs)

    def test_fleet_detail_is_loaded(self, session_factory, fleet):
        aircraft = FleetService(session_factory).aircraft_at('KSFO', status='S')[0]

        # Session is closed; relations must already be there
        assert aircraft.subfleet.type == 'B77W'
        assert sorted(f.code for f in aircraft.subfleet.fares) == ['J', 'Y']
        assert [r.name for r in aircraft.subfleet.ranks] == ['Captain']
        assert aircraft.to_dict(include_subfleet=True)['subfleet']['type'] == 'B77W'


class TestGetAircraft:

    def test_get(self, session_factory, fleet):
        aircraft = FleetService(session_factory).get_aircraft(fleet.aircraft['N101'])
        assert aircraft.registration == 'N101'
        assert aircraft.subfleet.name == '737-800'

    def test_soft_deleted_is_not_found(self, session_factory, fleet):
        with pytest.raises(NotFoundError):
            FleetService(session_factory).get_aircraft(fleet.aircraft['N999'])

    def test_missing(self, session_factory, fleet):
        with pytest.raises(NotFoundError):
            FleetService(session_factory).get_aircraft(424242)

    def test_non_numeric_id(self, session_factory, fleet):
        with pytest.raises(ValidationError):
            FleetService(session_factory).get_aircraft('N101')


class TestFlightHistory:

    def test_default_limit_is_five(self, session_factory, pireps, fleet):
        history = FlightHistoryReader(session_factory).history(fleet.aircraft['N102'])
        assert len(history) == 5

    def test_most_recent_first(self, session_factory, pireps, fleet):
        history = FlightHistoryReader(session_factory).history(fleet.aircraft['N102'])
        created = [p.created_at for p in history]
        assert created == sorted(created, reverse=True)
        # Accepted reports were filed with flight times 30..36, oldest first
        assert [p.flight_time for p in history] == [36, 35, 34, 33, 32]

    def test_only_accepted(self, session_factory, pireps, fleet):
        history = FlightHistoryReader(session_factory).history(fleet.aircraft['N102'], limit=50)
        assert len(history) == 7
        assert {p.state for p in history} == {PirepState.ACCEPTED.value}

    def test_rejected_reports_excluded(self, session_factory, pireps, fleet):
        history = FlightHistoryReader(session_factory).history(fleet.aircraft['N101'])
        assert sorted(p.flight_time for p in history) == [45, 60, 90]

    def test_accepts_aircraft_instance(self, session_factory, pireps, fleet):
        with session_factory() as session:
            aircraft = session.get(Aircraft, fleet.aircraft['N101'])
        history = FlightHistoryReader(session_factory).history(aircraft, limit=2)
        assert len(history) == 2

    def test_no_history(self, session_factory, pireps, fleet):
        assert FlightHistoryReader(session_factory).history(fleet.aircraft['N301']) == []

    @pytest.mark.parametrize('limit', [0, -3, 'many'])
    def test_invalid_limit(self, session_factory, fleet, limit):
        with pytest.raises(ValidationError):
            FlightHistoryReader(session_factory).history(fleet.aircraft['N101'], limit=limit)


class TestRanks:

    def test_list_ordered_by_hours(self, session_factory, fleet):
        ranks = RankService(session_factory).list_ranks()
        assert [r.name for r in ranks] == ['Cadet', 'Trainee', 'First Officer', 'Captain']

    def test_get_with_subfleets(self, session_factory, fleet):
        rank = RankService(session_factory).get_rank(fleet.captain)
        assert rank.name == 'Captain'
        assert sorted(s.type for s in rank.subfleets) == ['B738', 'B77W', 'C172']

    def test_rank_defaults(self, session_factory, fleet):
        rank = RankService(session_factory).get_rank(fleet.cadet)
        assert rank.auto_promote is True
        assert rank.auto_approve_acars is False
        assert rank.auto_approve_score is None

    def test_get_missing(self, session_factory, fleet):
        with pytest.raises(NotFoundError):
            RankService(session_factory).get_rank(9999)

    def test_get_invalid_id(self, session_factory, fleet):
        with pytest.raises(ValidationError):
            RankService(session_factory).get_rank('captain')

    @pytest.mark.parametrize('hours, expected', [
        (0, 'Cadet'),
        (49.9, 'Trainee'),
        (50, 'First Officer'),
        (1200, 'Captain'),
    ])
    def test_rank_for_hours(self, session_factory, fleet, hours, expected):
        assert RankService(session_factory).rank_for_hours(hours).name == expected

    def test_rank_for_negative_hours(self, session_factory, fleet):
        assert RankService(session_factory).rank_for_hours(-1) is None


class TestDatabaseFailures:

    def test_aircraft_at(self, broken_session_factory):
        with pytest.raises(PersistenceError):
            FleetService(broken_session_factory).aircraft_at('KSFO')

    def test_get_aircraft(self, broken_session_factory):
        with pytest.raises(PersistenceError):
            FleetService(broken_session_factory).get_aircraft(1)

    def test_history(self, broken_session_factory):
        with pytest.raises(PersistenceError):
            FlightHistoryReader(broken_session_factory).history(1)

    @pytest.mark.parametrize('call', [
        lambda service: service.list_ranks(),
        lambda service: service.get_rank(1),
        lambda service: service.rank_for_hours(100),
    ])
    def test_ranks(self, broken_session_factory, call):
        with pytest.raises(PersistenceError):
            call(RankService(broken_session_factory))
