"""Integration tests for the auth repositories on SQLite."""

from datetime import UTC, datetime

import asyncio
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from changelogs.config import DatabaseConfig

from changelogs.domain.auth.model.collaboration import Collaboration, CollaboratorRole
from changelogs.domain.auth.model.invitation import PendingInvitation
from changelogs.domain.auth.model.user import User
from changelogs.domain.auth.model.value import ExternalIdentity, ProjectId
from changelogs.domain.auth.service.account import AccountResolver
from changelogs.domain.project.model.project import Project
from changelogs.domain.shared.error import ConflictError, DuplicateAccountError, PersistenceError
from changelogs.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
)
from changelogs.infrastructure.persistence.repository.auth import (
    SqlCollaborationRepository,
    SqlPendingInvitationRepository,
    SqlUserRepository,
)
from changelogs.infrastructure.persistence.repository.project import SqlProjectRepository
from changelogs.infrastructure.persistence.tables import (
    collaborators_table,
    pending_invitations_table,
    users_table,
)
from changelogs.infrastructure.persistence.uow import SqlAlchemyUnitOfWork


async def count_rows(session: AsyncSession, table) -> int:
    result = await session.execute(select(func.count()).select_from(table))
    return result.scalar_one()


async def create_project(session: AsyncSession, slug: str = "p") -> Project:
    owner = User.create(subject=f"owner-{slug}", email=f"owner-{slug}@test.com")
    await SqlUserRepository(session).save(owner)
    project = Project(
        id=ProjectId.generate(),
        slug=slug,
        name=slug.upper(),
        owner_id=owner.id,
        created_at=datetime.now(UTC),
    )
    await SqlProjectRepository(session).save(project)
    await session.commit()
    return project


def make_resolver(session: AsyncSession) -> AccountResolver:
    return AccountResolver(
        _user_repo=SqlUserRepository(session),
        _invitation_repo=SqlPendingInvitationRepository(session),
        _collaboration_repo=SqlCollaborationRepository(session),
        _uow=SqlAlchemyUnitOfWork(session),
    )


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_save_and_lookup(self, session: AsyncSession):
        repo = SqlUserRepository(session)
        user = User.create(subject="u1", email="e@test.com", name="E")

        await repo.save(user)

        by_id = await repo.get(user.id)
        assert by_id is not None
        assert by_id.subject == "u1"
        assert by_id.created_at.tzinfo is not None
        assert (await repo.get_by_subject("u1")).id == user.id
        assert (await repo.get_by_email("E@TEST.com")).id == user.id
        assert await repo.get_by_subject("nobody") is None

    @pytest.mark.asyncio
    async def test_update_existing(self, session: AsyncSession):
        repo = SqlUserRepository(session)
        user = User.create(subject="u1", email="e@test.com")
        await repo.save(user)

        user.link_subject("u2", name="Renamed", picture=None)
        await repo.save(user)

        stored = await repo.get(user.id)
        assert stored.subject == "u2"
        assert stored.name == "Renamed"
        assert await count_rows(session, users_table) == 1

    @pytest.mark.asyncio
    async def test_duplicate_subject_raises(self, session: AsyncSession):
        repo = SqlUserRepository(session)
        await repo.save(User.create(subject="u1", email="a@test.com"))

        with pytest.raises(DuplicateAccountError):
            await repo.save(User.create(subject="u1", email="b@test.com"))

    @pytest.mark.asyncio
    async def test_duplicate_email_raises(self, session: AsyncSession):
        repo = SqlUserRepository(session)
        await repo.save(User.create(subject="u1", email="a@test.com"))

        with pytest.raises(DuplicateAccountError):
            await repo.save(User.create(subject="u2", email="a@test.com"))


class TestInvitationRepository:
    @pytest.mark.asyncio
    async def test_lookup_and_delete_by_email(self, session: AsyncSession):
        first = await create_project(session, "first")
        second = await create_project(session, "second")
        repo = SqlPendingInvitationRepository(session)

        await repo.save(
            PendingInvitation.create("a@x.com", project_id=first.id, role=CollaboratorRole.EDITOR)
        )
        await repo.save(
            PendingInvitation.create("a@x.com", project_id=second.id, role=CollaboratorRole.VIEWER)
        )

        invitations = await repo.get_by_email("A@X.com")
        assert {i.project_id for i in invitations} == {first.id, second.id}
        assert all(i.expires_at.tzinfo is not None for i in invitations)
        assert (await repo.get_for_project("a@x.com", first.id)).role == CollaboratorRole.EDITOR

        assert await repo.delete_by_email("a@x.com") == 2
        assert await repo.get_by_email("a@x.com") == []

    @pytest.mark.asyncio
    async def test_duplicate_invitation_raises(self, session: AsyncSession):
        project = await create_project(session)
        repo = SqlPendingInvitationRepository(session)
        await repo.save(
            PendingInvitation.create("a@x.com", project_id=project.id, role=CollaboratorRole.EDITOR)
        )

        with pytest.raises(ConflictError):
            await repo.save(
                PendingInvitation.create(
                    "a@x.com", project_id=project.id, role=CollaboratorRole.VIEWER
                )
            )


class TestCollaborationRepository:
    @pytest.mark.asyncio
    async def test_save_and_get(self, session: AsyncSession):
        project = await create_project(session)
        user = User.create(subject="u1", email="e@test.com")
        await SqlUserRepository(session).save(user)
        repo = SqlCollaborationRepository(session)

        await repo.save(
            Collaboration.create(user_id=user.id, project_id=project.id, role=CollaboratorRole.VIEWER)
        )

        stored = await repo.get(user.id, project.id)
        assert stored is not None
        assert stored.role == CollaboratorRole.VIEWER
        assert await repo.get(user.id, ProjectId.generate()) is None

    @pytest.mark.asyncio
    async def test_update_role_and_delete(self, session: AsyncSession):
        project = await create_project(session)
        user = User.create(subject="u1", email="e@test.com")
        await SqlUserRepository(session).save(user)
        repo = SqlCollaborationRepository(session)
        collaboration = Collaboration.create(
            user_id=user.id, project_id=project.id, role=CollaboratorRole.VIEWER
        )
        await repo.save(collaboration)

        collaboration.change_role(CollaboratorRole.EDITOR)
        await repo.save(collaboration)

        stored = await repo.get_by_id(collaboration.id)
        assert stored.role == CollaboratorRole.EDITOR
        assert [c.id for c in await repo.list_for_project(project.id)] == [collaboration.id]
        assert await count_rows(session, collaborators_table) == 1

        assert await repo.delete(collaboration.id) is True
        assert await repo.delete(collaboration.id) is False
        assert await repo.list_for_project(project.id) == []


class TestInvitationManagement:
    @pytest.mark.asyncio
    async def test_list_get_and_delete_by_id(self, session: AsyncSession):
        project = await create_project(session)
        other = await create_project(session, "other")
        repo = SqlPendingInvitationRepository(session)
        invitation = PendingInvitation.create(
            "a@x.com", project_id=project.id, role=CollaboratorRole.EDITOR
        )
        await repo.save(invitation)
        await repo.save(
            PendingInvitation.create("b@x.com", project_id=other.id, role=CollaboratorRole.VIEWER)
        )

        assert [i.id for i in await repo.list_for_project(project.id)] == [invitation.id]
        assert (await repo.get(invitation.id)).email == "a@x.com"

        assert await repo.delete(invitation.id) is True
        assert await repo.get(invitation.id) is None
        assert await repo.delete(invitation.id) is False
        assert await count_rows(session, pending_invitations_table) == 1


class TestProjectRepository:
    @pytest.mark.asyncio
    async def test_get_by_slug(self, session: AsyncSession):
        project = await create_project(session, "acme")
        repo = SqlProjectRepository(session)

        stored = await repo.get_by_slug("acme")

        assert stored is not None
        assert stored.id == project.id
        assert stored.is_owned_by(project.owner_id)
        assert await repo.get_by_slug("missing") is None


class TestAccountResolution:
    @pytest.mark.asyncio
    async def test_same_identity_twice_yields_one_user(self, session: AsyncSession):
        resolver = make_resolver(session)
        identity = ExternalIdentity(subject="u1", email="e@test.com")

        first = await resolver.resolve(identity)
        second = await resolver.resolve(identity)

        assert first.id == second.id
        assert await count_rows(session, users_table) == 1

    @pytest.mark.asyncio
    async def test_invitation_converted_on_first_login(self, session: AsyncSession):
        project = await create_project(session)
        await SqlPendingInvitationRepository(session).save(
            PendingInvitation.create("a@x.com", project_id=project.id, role=CollaboratorRole.EDITOR)
        )
        await session.commit()

        user = await make_resolver(session).resolve(
            ExternalIdentity(subject="new", email="a@x.com")
        )

        collaboration = await SqlCollaborationRepository(session).get(user.id, project.id)
        assert collaboration is not None
        assert collaboration.role == CollaboratorRole.EDITOR
        assert await count_rows(session, collaborators_table) == 1
        assert await count_rows(session, pending_invitations_table) == 0

    @pytest.mark.asyncio
    async def test_email_match_migrates_subject(self, session: AsyncSession):
        existing = User.create(subject="old-sub", email="b@y.com")
        await SqlUserRepository(session).save(existing)
        await session.commit()

        user = await make_resolver(session).resolve(
            ExternalIdentity(subject="new-sub", email="b@y.com")
        )

        assert user.id == existing.id
        stored = await SqlUserRepository(session).get(existing.id)
        assert stored.subject == "new-sub"
        assert await count_rows(session, users_table) == 1

    @pytest.mark.asyncio
    async def test_failed_conversion_leaves_no_trace(self, session: AsyncSession):
        first = await create_project(session, "first")
        second = await create_project(session, "second")
        invitations = SqlPendingInvitationRepository(session)
        await invitations.save(
            PendingInvitation.create("a@x.com", project_id=first.id, role=CollaboratorRole.EDITOR)
        )
        await invitations.save(
            PendingInvitation.create("a@x.com", project_id=second.id, role=CollaboratorRole.VIEWER)
        )
        await session.commit()

        resolver = AccountResolver(
            _user_repo=SqlUserRepository(session),
            _invitation_repo=FailingDeleteInvitationRepository(session),
            _collaboration_repo=SqlCollaborationRepository(session),
            _uow=SqlAlchemyUnitOfWork(session),
        )

        with pytest.raises(PersistenceError):
            await resolver.resolve(ExternalIdentity(subject="new", email="a@x.com"))

        assert await SqlUserRepository(session).get_by_subject("new") is None
        assert await count_rows(session, collaborators_table) == 0
        assert await count_rows(session, pending_invitations_table) == 2


class FailingDeleteInvitationRepository(SqlPendingInvitationRepository):
    """Fails after the collaborations have been written."""

    async def delete_by_email(self, email: str) -> int:
        raise PersistenceError("Database operation failed", code="database_error")


@pytest_asyncio.fixture
async def file_engine(tmp_path: Path):
    """File-backed database, so each session gets its own connection."""
    engine = create_db_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}"))
    await create_tables(engine)
    yield engine
    await engine.dispose()


class TestConcurrentSignup:
    @pytest.mark.asyncio
    async def test_simultaneous_first_logins_share_one_user(self, file_engine: AsyncEngine):
        factory = create_session_factory(file_engine)
        identity = ExternalIdentity(subject="u1", email="e@test.com")

        async def resolve_in_own_session():
            async with factory() as session:
                return await make_resolver(session).resolve(identity)

        first, second = await asyncio.gather(
            resolve_in_own_session(), resolve_in_own_session()
        )

        assert first.id == second.id
        async with factory() as session:
            assert await count_rows(session, users_table) == 1
            stored = await SqlUserRepository(session).get_by_subject("u1")
        assert stored is not None
        assert stored.id == first.id
