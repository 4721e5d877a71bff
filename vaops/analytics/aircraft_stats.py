"""
Aircraft statistics recalculation.

Rebuilds each aircraft's cumulative flight time from its PIREPs. The
value is recomputed from scratch every run rather than maintained
incrementally, so any drift (edited or deleted PIREPs, manual fixes) is
corrected by the next run.

Counting policy:
- Only ACCEPTED PIREPs count, the same set the flight history shows.
- Soft-deleted aircraft are skipped and keep their last stored value.

Failure policy is best-effort: every aircraft is written in its own
transaction. A failed aircraft is rolled back, logged and reported in the
result; the scan carries on with the next one.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from vaops.config import config
from vaops.errors import AppError, ConflictError
from vaops.models import Aircraft, Pirep, PirepState
from vaops.models.base import SessionFactory, SessionLocal

logger = logging.getLogger(__name__)

# One recalculation per process at a time
_run_lock = threading.Lock()


@dataclass
class RecalculationResult:
    """Outcome of one recalculation run."""
    processed: int = 0
    updated: int = 0
    changed: int = 0
    skipped_deleted: int = 0
    failed: List[Tuple[int, str]] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            'processed': self.processed,
            'updated': self.updated,
            'changed': self.changed,
            'skipped_deleted': self.skipped_deleted,
            'failed': [
                {'aircraft_id': aircraft_id, 'error': message}
                for aircraft_id, message in self.failed
            ],
            'ok': self.ok,
            'duration_s': round(self.duration_s, 3),
        }


class AircraftStatsAggregator:
    """
    Recomputes Aircraft.flight_time for the whole fleet.

    Aircraft are walked in id order, `page_size` ids at a time (keyset
    pagination), so large fleets are never loaded into memory at once.
    """

    def __init__(
        self,
        session_factory: SessionFactory = SessionLocal,
        page_size: Optional[int] = None,
        counted_states: Sequence[PirepState] = (PirepState.ACCEPTED,),
    ):
        self.session_factory = session_factory
        self.page_size = config.stats.page_size if page_size is None else page_size
        if self.page_size < 1:
            raise ValueError('page_size must be >= 1')
        self.counted_states = [PirepState(s).value for s in counted_states]

    def iter_aircraft_ids(self) -> Iterator[int]:
        """Yield ids of non-deleted aircraft, one page per query."""
        last_id = 0
        while True:
            stmt = (
                select(Aircraft.id)
                .where(Aircraft.id > last_id)
                .where(Aircraft.deleted_at.is_(None))
                .order_by(Aircraft.id.asc())
                .limit(self.page_size)
            )
            with self.session_factory() as session:
                ids = session.execute(stmt).scalars().all()
            if not ids:
                return
            yield from ids
            if len(ids) < self.page_size:
                return
            last_id = ids[-1]

    def flight_time_total(self, session, aircraft_id: int) -> int:
        """Sum of counted PIREP flight time for one aircraft (minutes)."""
        stmt = (
            select(func.coalesce(func.sum(Pirep.flight_time), 0))
            .where(Pirep.aircraft_id == aircraft_id)
            .where(Pirep.state.in_(self.counted_states))
        )
        return int(session.execute(stmt).scalar_one())

    def recalculate_aircraft(self, aircraft_id: int) -> Optional[bool]:
        """
        Recompute and persist one aircraft's flight time.

        Returns whether the stored value changed, or None if the aircraft
        has disappeared since it was listed.
        """
        with self.session_factory() as session:
            try:
                aircraft = session.get(Aircraft, aircraft_id)
                if aircraft is None:
                    return None
                total = self.flight_time_total(session, aircraft_id)
                changed = aircraft.flight_time != total
                aircraft.flight_time = total
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
        return changed

    def recalculate(self, aircraft_ids: Iterable[int]) -> RecalculationResult:
        """Recalculate the given aircraft, collecting failures."""
        start_time = time.perf_counter()
        result = RecalculationResult()

        for aircraft_id in aircraft_ids:
            result.processed += 1
            try:
                changed = self.recalculate_aircraft(aircraft_id)
            except (SQLAlchemyError, AppError) as e:
                logger.error(f'Flight time update failed for aircraft {aircraft_id}: {e}')
                result.failed.append((aircraft_id, str(e)))
                continue
            if changed is None:
                logger.debug(f'Aircraft {aircraft_id} vanished during recalculation')
                continue
            result.updated += 1
            if changed:
                result.changed += 1

        result.duration_s = time.perf_counter() - start_time
        return result

    def recalculate_all(self) -> RecalculationResult:
        """
        Recalculate flight time for every non-deleted aircraft.

        Raises:
            ConflictError if a recalculation is already running in this process
        """
        if not _run_lock.acquire(blocking=False):
            logger.warning('Aircraft stats recalculation already running')
            raise ConflictError('Aircraft stats recalculation already running')

        try:
            logger.info(
                f'Recalculating aircraft flight time '
                f'(page_size={self.page_size}, states={self.counted_states})'
            )
            with self.session_factory() as session:
                skipped_deleted = session.execute(
                    select(func.count(Aircraft.id)).where(Aircraft.deleted_at.is_not(None))
                ).scalar_one()

            result = self.recalculate(self.iter_aircraft_ids())
            result.skipped_deleted = skipped_deleted

            if result.ok:
                logger.info(
                    f'Recalculated {result.updated} aircraft '
                    f'({result.changed} changed, {result.skipped_deleted} deleted skipped) '
                    f'in {result.duration_s:.2f}s'
                )
            else:
                failed_ids = ', '.join(str(aircraft_id) for aircraft_id, _ in result.failed)
                logger.warning(
                    f'Recalculation finished with {len(result.failed)} failures '
                    f'out of {result.processed} aircraft; failed ids: {failed_ids}'
                )
            return result
        finally:
            _run_lock.release()
