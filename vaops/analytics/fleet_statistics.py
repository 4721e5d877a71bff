"""
Fleet-wide summary statistics using NumPy.

Aggregates the stored (recalculated) flight time of every active airframe
into a distribution summary, plus counts by operational state and status.
"""

import logging
from typing import Dict, List, Optional

import numpy as np
from sqlalchemy import select

from vaops.errors import persistence_errors
from vaops.models import Aircraft
from vaops.models.base import SessionFactory, SessionLocal

logger = logging.getLogger(__name__)


def _distribution(values: List[float]) -> Optional[dict]:
    if not values:
        return None
    arr = np.asarray(values, dtype=np.float64)
    return {
        'mean': round(float(np.mean(arr)), 2),
        'median': round(float(np.median(arr)), 2),
        'min': float(np.min(arr)),
        'max': float(np.max(arr)),
        'std': round(float(np.std(arr)), 2),
        'total': float(np.sum(arr)),
    }


class FleetStatistics:
    """Summarises the fleet's utilisation."""

    def __init__(self, session_factory: SessionFactory = SessionLocal):
        self.session_factory = session_factory

    def summary(self) -> dict:
        """
        Compute aggregate statistics across all non-deleted aircraft.

        Flight time figures are in minutes.
        """
        stmt = select(Aircraft.flight_time, Aircraft.state, Aircraft.status).where(
            Aircraft.deleted_at.is_(None)
        )
        with persistence_errors('summarise fleet'), self.session_factory() as session:
            rows = session.execute(stmt).all()

        if not rows:
            return {
                'count': 0,
                'flight_time': None,
                'by_state': {},
                'by_status': {},
            }

        flight_times = [row.flight_time or 0 for row in rows]

        by_state: Dict[str, int] = {}
        by_status: Dict[str, int] = {}
        for row in rows:
            by_state[row.state] = by_state.get(row.state, 0) + 1
            by_status[row.status] = by_status.get(row.status, 0) + 1

        return {
            'count': len(rows),
            'flight_time': _distribution(flight_times),
            'by_state': by_state,
            'by_status': by_status,
        }
