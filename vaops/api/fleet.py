"""
Fleet API endpoints.

Provides endpoints for:
- GET /api/fleet/airport/<icao> - Aircraft at an airport (?state=&status=&rank=)
- GET /api/fleet/aircraft/<id> - Single aircraft with recent flight history
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from vaops.config import config
from vaops.services import FleetService, FlightHistoryReader

logger = logging.getLogger(__name__)

fleet_bp = Blueprint('fleet', __name__, url_prefix='/api/fleet')


@fleet_bp.route('/airport/<icao>', methods=['GET'])
def fleet_at_airport(icao: str):
    """
    Aircraft currently at an airport.

    Query parameters (all optional):
    - state: parked|in_use|in_air
    - status: A|S|R|C|W
    - rank: rank id; only aircraft that rank is allowed to fly
    """
    service = FleetService(current_app.config['SESSION_FACTORY'])
    aircraft = service.aircraft_at(
        icao,
        state=request.args.get('state'),
        status=request.args.get('status'),
        rank=request.args.get('rank'),
    )
    return jsonify({
        'data': [a.to_dict(include_subfleet=True) for a in aircraft],
        'count': len(aircraft),
    })


@fleet_bp.route('/aircraft/<aircraft_id>', methods=['GET'])
def get_aircraft(aircraft_id: str):
    """
    Single aircraft plus its most recent accepted PIREPs.

    Query parameters:
    - limit: number of PIREPs in the history (default 5)
    """
    session_factory = current_app.config['SESSION_FACTORY']
    aircraft = FleetService(session_factory).get_aircraft(aircraft_id)
    history = FlightHistoryReader(session_factory).history(
        aircraft.id,
        limit=request.args.get('limit', config.stats.history_limit),
    )

    result = aircraft.to_dict(include_subfleet=True)
    result['flight_hours'] = aircraft.flight_hours
    result['history'] = [p.to_dict() for p in history]
    return jsonify({'data': result})
