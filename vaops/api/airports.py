"""
Airport API endpoints.

Provides endpoints for:
- GET /api/airports - Paginated airport list (hub filter, sorting)
- GET /api/airports/hubs - Hub airports only
- GET /api/airports/search?term= - Code substring search
- GET /api/airports/<icao> - Single airport from the local table
- GET /api/airports/<icao>/lookup - Airport via the external directory
- GET /api/airports/<from>/distance/<to> - Great-circle distance
"""

import logging
import time

from flask import Blueprint, current_app, jsonify, request

from vaops.services import AirportDirectory, AirportService

logger = logging.getLogger(__name__)

airports_bp = Blueprint('airports', __name__, url_prefix='/api/airports')


def _airport_service() -> AirportService:
    session_factory = current_app.config['SESSION_FACTORY']
    directory = AirportDirectory(
        session_factory,
        current_app.config.get('AIRPORT_LOOKUP_CLIENT'),
    )
    return AirportService(session_factory, directory)


@airports_bp.route('', methods=['GET'])
def list_airports():
    """
    List airports, paginated.

    Query parameters:
    - hub: boolean, restrict to hubs / non-hubs
    - sort: sort column (icao|iata|name|location|country, default icao)
    - direction: asc|desc (default asc)
    - page, per_page: pagination
    """
    start_time = time.perf_counter()

    page = _airport_service().list_airports(
        filters={'hub': request.args.get('hub')},
        sort_key=request.args.get('sort', 'icao'),
        sort_dir=request.args.get('direction', 'asc'),
        page=request.args.get('page'),
        per_page=request.args.get('per_page'),
    )

    result = page.to_dict(lambda a: a.to_dict())
    result['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)
    return jsonify(result)


@airports_bp.route('/hubs', methods=['GET'])
def list_hubs():
    """List hub airports, paginated."""
    page = _airport_service().list_hubs(
        page=request.args.get('page'),
        per_page=request.args.get('per_page'),
    )
    return jsonify(page.to_dict(lambda a: a.to_dict()))


@airports_bp.route('/search', methods=['GET'])
def search_airports():
    """
    Find airports whose code contains `term`.

    Terms shorter than 2 characters return an empty list.
    """
    airports = _airport_service().search_airports(request.args.get('term'))
    return jsonify({'data': [a.to_dict() for a in airports]})


@airports_bp.route('/<icao>', methods=['GET'])
def get_airport(icao: str):
    """Get a single airport by code (case-insensitive)."""
    airport = _airport_service().get_airport(icao)
    return jsonify({'data': airport.to_dict()})


@airports_bp.route('/<icao>/lookup', methods=['GET'])
def lookup_airport(icao: str):
    """Look an airport up via the external directory."""
    record = _airport_service().lookup_airport(icao)
    return jsonify({'data': record.to_dict()})


@airports_bp.route('/<from_icao>/distance/<to_icao>', methods=['GET'])
def airport_distance(from_icao: str, to_icao: str):
    """Great-circle distance between two airports, in every unit."""
    start_time = time.perf_counter()

    distance = _airport_service().calculate_distance(from_icao, to_icao)

    return jsonify({
        'data': {
            'fromIcao': from_icao.upper(),
            'toIcao': to_icao.upper(),
            'distance': distance.to_dict(),
        },
        'query_time_ms': round((time.perf_counter() - start_time) * 1000, 2),
    })
