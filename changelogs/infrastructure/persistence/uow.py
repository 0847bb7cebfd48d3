"""SQLAlchemy-backed unit of work."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from changelogs.domain.shared.error import PersistenceError
from changelogs.domain.shared.uow import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits or rolls back the request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.exception("Database commit failed")
            await self.session.rollback()
            raise PersistenceError("Database commit failed", code="database_error") from e

    async def rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            logger.exception("Database rollback failed")
            raise PersistenceError("Database rollback failed", code="database_error") from e
