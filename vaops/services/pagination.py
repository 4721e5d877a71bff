"""Offset pagination over SQLAlchemy select statements."""

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from vaops.config import config
from vaops.errors import ValidationError


@dataclass
class Page:
    """One page of results plus the numbers a client needs to walk the rest."""
    items: List[Any]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def to_dict(self, serialize: Callable[[Any], dict]) -> dict:
        return {
            'data': [serialize(item) for item in self.items],
            'meta': {
                'current_page': self.page,
                'per_page': self.per_page,
                'total': self.total,
                'last_page': self.last_page,
            },
        }


def _positive_int(value, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer') from None
    if number < 1:
        raise ValidationError(f'{name} must be >= 1')
    return number


def resolve_page_args(page=None, per_page=None) -> tuple:
    """Validate page/per_page, applying configured defaults and cap."""
    page = 1 if page in (None, '') else _positive_int(page, 'page')
    if per_page in (None, ''):
        per_page = config.pagination.per_page
    else:
        per_page = _positive_int(per_page, 'per_page')
    return page, min(per_page, config.pagination.max_per_page)


def paginate(
    session: Session,
    stmt: Select,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Page:
    """Run `stmt` for a single page and count the full result set."""
    page, per_page = resolve_page_args(page, per_page)

    total = session.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar_one()

    items = session.execute(
        stmt.limit(per_page).offset((page - 1) * per_page)
    ).scalars().all()

    return Page(items=list(items), total=total, page=page, per_page=per_page)
