"""SQL repository implementations for the auth domain."""

from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from changelogs.domain.auth.model.collaboration import Collaboration, CollaboratorRole
from changelogs.domain.auth.model.invitation import PendingInvitation
from changelogs.domain.auth.model.user import User
from changelogs.domain.auth.model.value import (
    CollaborationId,
    InvitationId,
    ProjectId,
    UserId,
)
from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)
from changelogs.domain.shared.error import ConflictError, DuplicateAccountError
from changelogs.infrastructure.persistence.repository.base import as_utc, execute, flush
from changelogs.infrastructure.persistence.tables import (
    collaborators_table,
    pending_invitations_table,
    users_table,
)


def _row_to_user(row: dict) -> User:
    """Convert a database row to a User model."""
    return User(
        id=UserId(UUID(row["id"])),
        subject=row["subject"],
        email=row["email"],
        name=row["name"],
        picture=row["picture"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )


def _user_to_dict(user: User) -> dict:
    """Convert a User model to a database row dict."""
    return {
        "id": str(user.id),
        "subject": user.subject,
        "email": user.email,
        "name": user.name,
        "picture": user.picture,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def _row_to_invitation(row: dict) -> PendingInvitation:
    return PendingInvitation(
        id=InvitationId(UUID(row["id"])),
        email=row["email"],
        project_id=ProjectId(UUID(row["project_id"])),
        role=CollaboratorRole(row["role"]),
        expires_at=as_utc(row["expires_at"]),
        created_at=as_utc(row["created_at"]),
    )


def _invitation_to_dict(invitation: PendingInvitation) -> dict:
    return {
        "id": str(invitation.id),
        "email": invitation.email,
        "project_id": str(invitation.project_id),
        "role": invitation.role.value,
        "expires_at": invitation.expires_at,
        "created_at": invitation.created_at,
    }


def _row_to_collaboration(row: dict) -> Collaboration:
    return Collaboration(
        id=CollaborationId(UUID(row["id"])),
        user_id=UserId(UUID(row["user_id"])),
        project_id=ProjectId(UUID(row["project_id"])),
        role=CollaboratorRole(row["role"]),
        created_at=as_utc(row["created_at"]),
    )


def _collaboration_to_dict(collaboration: Collaboration) -> dict:
    return {
        "id": str(collaboration.id),
        "user_id": str(collaboration.user_id),
        "project_id": str(collaboration.project_id),
        "role": collaboration.role.value,
        "created_at": collaboration.created_at,
    }


class SqlUserRepository(UserRepository):
    """SQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId) -> User | None:
        stmt = select(users_table).where(users_table.c.id == str(user_id))
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_user(dict(row)) if row else None

    async def get_by_subject(self, subject: str) -> User | None:
        stmt = select(users_table).where(users_table.c.subject == subject)
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_user(dict(row)) if row else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(users_table).where(users_table.c.email == email.lower())
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_user(dict(row)) if row else None

    async def save(self, user: User) -> None:
        user_dict = _user_to_dict(user)
        existing = await self.get(user.id)

        if existing:
            stmt = update(users_table).where(users_table.c.id == str(user.id)).values(**user_dict)
        else:
            stmt = insert(users_table).values(**user_dict)

        try:
            await execute(self.session, stmt)
            await flush(self.session)
        except IntegrityError as e:
            raise DuplicateAccountError(
                "A user with this subject or email already exists",
                code="duplicate_account",
            ) from e


class SqlPendingInvitationRepository(PendingInvitationRepository):
    """SQL implementation of PendingInvitationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, invitation_id: InvitationId) -> PendingInvitation | None:
        stmt = select(pending_invitations_table).where(
            pending_invitations_table.c.id == str(invitation_id)
        )
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_invitation(dict(row)) if row else None

    async def get_by_email(self, email: str) -> list[PendingInvitation]:
        stmt = (
            select(pending_invitations_table)
            .where(pending_invitations_table.c.email == email.lower())
            .order_by(pending_invitations_table.c.created_at)
        )
        result = await execute(self.session, stmt)
        return [_row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def get_for_project(self, email: str, project_id: ProjectId) -> PendingInvitation | None:
        stmt = select(pending_invitations_table).where(
            pending_invitations_table.c.email == email.lower(),
            pending_invitations_table.c.project_id == str(project_id),
        )
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_invitation(dict(row)) if row else None

    async def list_for_project(self, project_id: ProjectId) -> list[PendingInvitation]:
        stmt = (
            select(pending_invitations_table)
            .where(pending_invitations_table.c.project_id == str(project_id))
            .order_by(pending_invitations_table.c.created_at.desc())
        )
        result = await execute(self.session, stmt)
        return [_row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def save(self, invitation: PendingInvitation) -> None:
        stmt = insert(pending_invitations_table).values(**_invitation_to_dict(invitation))
        try:
            await execute(self.session, stmt)
            await flush(self.session)
        except IntegrityError as e:
            raise ConflictError(
                "An invitation has already been sent to this email", code="already_invited"
            ) from e

    async def delete_by_email(self, email: str) -> int:
        stmt = delete(pending_invitations_table).where(
            pending_invitations_table.c.email == email.lower()
        )
        result = await execute(self.session, stmt)
        await flush(self.session)
        return result.rowcount or 0

    async def delete(self, invitation_id: InvitationId) -> bool:
        stmt = delete(pending_invitations_table).where(
            pending_invitations_table.c.id == str(invitation_id)
        )
        result = await execute(self.session, stmt)
        await flush(self.session)
        return bool(result.rowcount)


class SqlCollaborationRepository(CollaborationRepository):
    """SQL implementation of CollaborationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId, project_id: ProjectId) -> Collaboration | None:
        stmt = select(collaborators_table).where(
            collaborators_table.c.user_id == str(user_id),
            collaborators_table.c.project_id == str(project_id),
        )
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_collaboration(dict(row)) if row else None

    async def get_by_id(self, collaboration_id: CollaborationId) -> Collaboration | None:
        stmt = select(collaborators_table).where(collaborators_table.c.id == str(collaboration_id))
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_collaboration(dict(row)) if row else None

    async def list_for_project(self, project_id: ProjectId) -> list[Collaboration]:
        stmt = (
            select(collaborators_table)
            .where(collaborators_table.c.project_id == str(project_id))
            .order_by(collaborators_table.c.created_at)
        )
        result = await execute(self.session, stmt)
        return [_row_to_collaboration(dict(row)) for row in result.mappings().all()]

    async def save(self, collaboration: Collaboration) -> None:
        collaboration_dict = _collaboration_to_dict(collaboration)
        existing = await self.get_by_id(collaboration.id)

        if existing:
            # Only the role changes after creation
            stmt = (
                update(collaborators_table)
                .where(collaborators_table.c.id == str(collaboration.id))
                .values(role=collaboration_dict["role"])
            )
        else:
            stmt = insert(collaborators_table).values(**collaboration_dict)

        try:
            await execute(self.session, stmt)
            await flush(self.session)
        except IntegrityError as e:
            raise ConflictError(
                "This user is already a collaborator", code="already_collaborator"
            ) from e

    async def delete(self, collaboration_id: CollaborationId) -> bool:
        stmt = delete(collaborators_table).where(collaborators_table.c.id == str(collaboration_id))
        result = await execute(self.session, stmt)
        await flush(self.session)
        return bool(result.rowcount)
