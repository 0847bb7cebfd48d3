"""Shared fixtures for auth domain tests."""

from unittest.mock import AsyncMock

import pytest

from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)
from changelogs.domain.auth.service.account import AccountResolver
from changelogs.domain.shared.uow import UnitOfWork


class FakeUnitOfWork(UnitOfWork):
    """Records transaction outcomes instead of touching a database."""

    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def user_repo() -> AsyncMock:
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_subject.return_value = None
    repo.get_by_email.return_value = None
    return repo


@pytest.fixture
def invitation_repo() -> AsyncMock:
    repo = AsyncMock(spec=PendingInvitationRepository)
    repo.get_by_email.return_value = []
    repo.delete_by_email.return_value = 0
    return repo


@pytest.fixture
def collaboration_repo() -> AsyncMock:
    return AsyncMock(spec=CollaborationRepository)


@pytest.fixture
def account_resolver(
    user_repo: AsyncMock,
    invitation_repo: AsyncMock,
    collaboration_repo: AsyncMock,
    uow: FakeUnitOfWork,
) -> AccountResolver:
    return AccountResolver(
        _user_repo=user_repo,
        _invitation_repo=invitation_repo,
        _collaboration_repo=collaboration_repo,
        _uow=uow,
    )
