from typing import AsyncIterable

from dishka import provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from changelogs.config import Config
from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)
from changelogs.domain.project.port.repository import ProjectRepository
from changelogs.domain.shared.uow import UnitOfWork
from changelogs.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from changelogs.infrastructure.persistence.repository.auth import (
    SqlCollaborationRepository,
    SqlPendingInvitationRepository,
    SqlUserRepository,
)
from changelogs.infrastructure.persistence.repository.project import SqlProjectRepository
from changelogs.infrastructure.persistence.uow import SqlAlchemyUnitOfWork
from changelogs.util.di.base import Provider
from changelogs.util.di.scope import Scope


class PersistenceProvider(Provider):
    # APP-scoped factories
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per request)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    uow = provide(SqlAlchemyUnitOfWork, scope=Scope.UOW, provides=UnitOfWork)

    # UOW-scoped repositories
    user_repo = provide(SqlUserRepository, scope=Scope.UOW, provides=UserRepository)
    invitation_repo = provide(
        SqlPendingInvitationRepository,
        scope=Scope.UOW,
        provides=PendingInvitationRepository,
    )
    collaboration_repo = provide(
        SqlCollaborationRepository,
        scope=Scope.UOW,
        provides=CollaborationRepository,
    )
    project_repo = provide(SqlProjectRepository, scope=Scope.UOW, provides=ProjectRepository)
