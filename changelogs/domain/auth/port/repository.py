"""Repository ports for the auth domain."""

from abc import abstractmethod
from typing import Protocol

from changelogs.domain.auth.model.collaboration import Collaboration
from changelogs.domain.auth.model.invitation import PendingInvitation
from changelogs.domain.auth.model.user import User
from changelogs.domain.auth.model.value import (
    CollaborationId,
    InvitationId,
    ProjectId,
    UserId,
)
from changelogs.domain.shared.port import Port


class UserRepository(Port, Protocol):
    """Repository for User aggregate persistence."""

    @abstractmethod
    async def get(self, user_id: UserId) -> User | None:
        """Get a user by ID."""
        ...

    @abstractmethod
    async def get_by_subject(self, subject: str) -> User | None:
        """Get a user by identity provider subject."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address."""
        ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save a user (create or update).

        Raises:
            DuplicateAccountError: If another user already holds the subject or email
        """
        ...


class PendingInvitationRepository(Port, Protocol):
    """Repository for PendingInvitation persistence."""

    @abstractmethod
    async def get(self, invitation_id: InvitationId) -> PendingInvitation | None:
        """Get an invitation by ID."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> list[PendingInvitation]:
        """Get all invitations addressed to an email."""
        ...

    @abstractmethod
    async def get_for_project(self, email: str, project_id: ProjectId) -> PendingInvitation | None:
        """Get the invitation for an email on one project."""
        ...

    @abstractmethod
    async def list_for_project(self, project_id: ProjectId) -> list[PendingInvitation]:
        """Get a project's invitations, newest first."""
        ...

    @abstractmethod
    async def save(self, invitation: PendingInvitation) -> None:
        """Save an invitation."""
        ...

    @abstractmethod
    async def delete_by_email(self, email: str) -> int:
        """Delete every invitation addressed to an email. Returns count deleted."""
        ...

    @abstractmethod
    async def delete(self, invitation_id: InvitationId) -> bool:
        """Delete one invitation. Returns False if it did not exist."""
        ...


class CollaborationRepository(Port, Protocol):
    """Repository for Collaboration persistence."""

    @abstractmethod
    async def get(self, user_id: UserId, project_id: ProjectId) -> Collaboration | None:
        """Get a user's collaboration on a project."""
        ...

    @abstractmethod
    async def get_by_id(self, collaboration_id: CollaborationId) -> Collaboration | None:
        """Get a collaboration by ID."""
        ...

    @abstractmethod
    async def list_for_project(self, project_id: ProjectId) -> list[Collaboration]:
        """Get a project's collaborations, oldest first."""
        ...

    @abstractmethod
    async def save(self, collaboration: Collaboration) -> None:
        """Save a collaboration (create, or update its role)."""
        ...

    @abstractmethod
    async def delete(self, collaboration_id: CollaborationId) -> bool:
        """Delete one collaboration. Returns False if it did not exist."""
        ...
