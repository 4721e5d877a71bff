"""
vaops Flask Application.

Main entry point for the web application. Initializes:
- Database schema
- Airport lookup client
- API routes
- Error handlers
- Admin CLI commands (recalculate-stats, import-airports)

Usage:
    python -m vaops.app

Or with gunicorn:
    gunicorn 'vaops.app:create_app()'

Admin commands:
    flask --app vaops.app recalculate-stats
    flask --app vaops.app import-airports airports.csv
"""

import logging
import os
from pathlib import Path
from typing import Optional

import click
from flask import Flask, jsonify
from flask_cors import CORS

from vaops.analytics import AircraftStatsAggregator
from vaops.api import airports_bp, fleet_bp, ranks_bp, stats_bp
from vaops.config import config
from vaops.errors import AppError
from vaops.ingestion import load_airports_csv
from vaops.models import init_db
from vaops.models.base import SessionFactory, SessionLocal
from vaops.services import AirportLookupClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    session_factory: Optional[SessionFactory] = None,
    lookup_client: Optional[AirportLookupClient] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        session_factory: Session factory to use instead of the configured
                         database (tests pass one bound to their own engine;
                         its schema is then the caller's responsibility).
        lookup_client: External airport lookup client. Created from config
                       if None.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    if session_factory is None:
        logger.info('Initializing database...')
        init_db()
        session_factory = SessionLocal
    app.config['SESSION_FACTORY'] = session_factory

    app.config['AIRPORT_LOOKUP_CLIENT'] = lookup_client or AirportLookupClient.from_config()

    # Register API blueprints
    app.register_blueprint(airports_bp)
    app.register_blueprint(fleet_bp)
    app.register_blueprint(ranks_bp)
    app.register_blueprint(stats_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(AppError)
    def app_error(e: AppError):
        if e.status_code >= 500:
            logger.error(f'{type(e).__name__}: {e.message}')
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {'error': 'Method not allowed'}, 405

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    # -------------------------------------------------------------------------
    # Admin commands
    # -------------------------------------------------------------------------

    @app.cli.command('recalculate-stats')
    def recalculate_stats_command():
        """Recalculate aircraft flight time from accepted PIREPs."""
        result = AircraftStatsAggregator(app.config['SESSION_FACTORY']).recalculate_all()
        click.echo(
            f'Updated {result.updated} aircraft ({result.changed} changed), '
            f'{len(result.failed)} failed, {result.skipped_deleted} deleted skipped'
        )
        for aircraft_id, message in result.failed:
            click.echo(f'  aircraft {aircraft_id}: {message}', err=True)
        if not result.ok:
            raise SystemExit(1)

    @app.cli.command('import-airports')
    @click.argument('csv_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
    @click.option('--batch-size', default=500, show_default=True)
    def import_airports_command(csv_path: Path, batch_size: int):
        """Load airports from a CSV file."""
        loaded = load_airports_csv(csv_path, batch_size, app.config['SESSION_FACTORY'])
        click.echo(f'Loaded {loaded} airports')

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    # Get port from environment or default
    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting vaops on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
    )


if __name__ == '__main__':
    run_development_server()
