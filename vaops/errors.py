"""
Application error types.

Each error carries the HTTP status it maps to, so service code can raise
without knowing about Flask and the app factory can serialize uniformly.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class NotFoundError(AppError):
    """Requested entity (airport, aircraft, rank) does not exist."""
    status_code = 404

    def __init__(self, kind: str, identifier, message: Optional[str] = None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(message or f'{kind} {identifier} not found')

    def to_dict(self) -> dict:
        return {
            'error': self.message,
            'kind': self.kind,
            'id': self.identifier,
        }


class ValidationError(AppError):
    """Malformed filter, sort or search input."""
    status_code = 400


class ConflictError(AppError):
    """Operation cannot run in the current state (e.g. job already running)."""
    status_code = 409


class PersistenceError(AppError):
    """Underlying store operation failed."""
    status_code = 500


class LookupServiceError(AppError):
    """External airport directory failed or returned garbage."""
    status_code = 502


@contextmanager
def persistence_errors(action: str) -> Iterator[None]:
    """
    Surface store failures as PersistenceError.

    Usage:
        with persistence_errors('load airport'), session_factory() as session:
            ...
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f'Failed to {action}: {e}')
        raise PersistenceError(f'Failed to {action}') from e
