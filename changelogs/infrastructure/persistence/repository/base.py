"""Helpers shared by the SQLAlchemy repositories."""

import logging
from datetime import UTC, datetime

from sqlalchemy import Executable, Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from changelogs.domain.shared.error import PersistenceError

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on the way back; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


async def execute(session: AsyncSession, stmt: Executable) -> Result:
    """Run a statement, translating driver failures into PersistenceError.

    IntegrityError passes through untouched; the caller knows what the
    conflicting constraint means.
    """
    try:
        return await session.execute(stmt)
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Database statement failed")
        raise PersistenceError("Database operation failed", code="database_error") from e


async def flush(session: AsyncSession) -> None:
    """Flush pending changes with the same error translation as `execute`."""
    try:
        await session.flush()
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Database flush failed")
        raise PersistenceError("Database operation failed", code="database_error") from e
