"""Pilot rank configuration queries."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from vaops.errors import NotFoundError, ValidationError, persistence_errors
from vaops.models import Rank
from vaops.models.base import SessionFactory, SessionLocal

logger = logging.getLogger(__name__)


class RankService:

    def __init__(self, session_factory: SessionFactory = SessionLocal):
        self.session_factory = session_factory

    def list_ranks(self) -> List[Rank]:
        """All ranks, lowest hour requirement first."""
        stmt = select(Rank).order_by(Rank.hours.asc(), Rank.name.asc())
        with persistence_errors('list ranks'), self.session_factory() as session:
            return list(session.execute(stmt).scalars().all())

    def get_rank(self, rank_id) -> Rank:
        """Single rank with the subfleets it may fly."""
        try:
            rank_id = int(rank_id)
        except (TypeError, ValueError):
            raise ValidationError(f'rank id must be an integer, got {rank_id!r}') from None

        stmt = select(Rank).where(Rank.id == rank_id).options(selectinload(Rank.subfleets))
        with persistence_errors(f'load rank {rank_id}'), self.session_factory() as session:
            rank = session.execute(stmt).scalars().first()
        if rank is None:
            raise NotFoundError('rank', rank_id)
        return rank

    def rank_for_hours(self, hours: float) -> Optional[Rank]:
        """
        Highest rank whose hour threshold has been reached.

        Returns None if no rank applies (e.g., negative hours or no ranks).
        """
        stmt = (
            select(Rank)
            .where(Rank.hours <= hours)
            .order_by(Rank.hours.desc(), Rank.id.desc())
            .limit(1)
        )
        with persistence_errors('look up rank for hours'), self.session_factory() as session:
            return session.execute(stmt).scalars().first()
