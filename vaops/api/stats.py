"""
Statistics and administration API endpoints.

Provides endpoints for:
- GET /api/stats/fleet - Fleet-wide utilisation statistics
- GET /api/stats/status - System status and health
- POST /api/stats/recalculate - Rebuild aircraft flight time from PIREPs
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vaops.analytics import AircraftStatsAggregator, FleetStatistics
from vaops.config import config

logger = logging.getLogger(__name__)

stats_bp = Blueprint('stats', __name__, url_prefix='/api/stats')


@stats_bp.route('/fleet', methods=['GET'])
def get_fleet_stats():
    """
    Get aggregate statistics for all aircraft.

    Returns:
    - Aircraft count
    - Flight time distribution (minutes)
    - Counts by state and status
    """
    start_time = time.perf_counter()

    stats = FleetStatistics(current_app.config['SESSION_FACTORY']).summary()

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'fleet': stats,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@stats_bp.route('/status', methods=['GET'])
def get_system_status():
    """
    Get system health and status information.

    Returns:
    - Database connectivity
    - Airport lookup client status
    """
    start_time = time.perf_counter()

    db_ok = True
    try:
        with current_app.config['SESSION_FACTORY']() as session:
            session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        db_ok = False
        logger.error(f'Database health check failed: {e}')

    lookup_client = current_app.config.get('AIRPORT_LOOKUP_CLIENT')

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'healthy' if db_ok else 'degraded',
        'database': {
            'connected': db_ok,
            'type': 'sqlite' if config.database.is_sqlite else 'server',
        },
        'airport_lookup': lookup_client.stats if lookup_client else {'configured': False},
        'config': {
            'per_page': config.pagination.per_page,
            'stats_page_size': config.stats.page_size,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@stats_bp.route('/recalculate', methods=['POST'])
def recalculate_stats():
    """
    Recalculate every aircraft's flight time from accepted PIREPs.

    Returns 200 when all aircraft were updated, 207 when some failed
    (the failed ids are listed), 409 if a run is already in progress.
    """
    aggregator = AircraftStatsAggregator(current_app.config['SESSION_FACTORY'])
    result = aggregator.recalculate_all()
    return jsonify(result.to_dict()), 200 if result.ok else 207
