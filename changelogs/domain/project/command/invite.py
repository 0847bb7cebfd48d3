"""Invite a collaborator to a project by email."""

import logging
from datetime import datetime
from enum import StrEnum

from changelogs.domain.auth.model.collaboration import Collaboration, CollaboratorRole
from changelogs.domain.auth.model.invitation import PendingInvitation
from changelogs.domain.auth.model.value import ProjectId, UserId
from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)
from changelogs.domain.project.port.repository import ProjectRepository
from changelogs.domain.project.service.ownership import require_owned_project
from changelogs.domain.shared.command import Command, CommandHandler, Result
from changelogs.domain.shared.error import ConflictError, ValidationError
from changelogs.domain.shared.uow import UnitOfWork

logger = logging.getLogger(__name__)


class InvitationOutcome(StrEnum):
    ADDED = "added"  # Invitee already had an account; collaboration created
    INVITED = "invited"  # No account yet; pending invitation created


class InviteCollaborator(Command):
    """Command for a project owner to invite someone by email."""

    project_slug: str
    email: str
    role: CollaboratorRole


class InviteCollaboratorResult(Result):
    status: InvitationOutcome
    email: str
    role: CollaboratorRole
    expires_at: datetime | None = None  # Set for pending invitations only


class InviteCollaboratorHandler(CommandHandler[InviteCollaborator, InviteCollaboratorResult]):
    """Handler for InviteCollaborator command.

    Existing users are added straight away. Unknown emails get a
    PendingInvitation that AccountResolver converts on their first login.
    """

    current_user_id: UserId
    project_repo: ProjectRepository
    user_repo: UserRepository
    invitation_repo: PendingInvitationRepository
    collaboration_repo: CollaborationRepository
    uow: UnitOfWork

    async def run(self, cmd: InviteCollaborator) -> InviteCollaboratorResult:
        email = cmd.email.strip().lower()
        if not email or "@" not in email:
            raise ValidationError("Please enter a valid email address", field="email")

        project = await require_owned_project(
            self.project_repo, cmd.project_slug, self.current_user_id
        )

        owner = await self.user_repo.get(self.current_user_id)
        if owner is not None and owner.email == email:
            raise ValidationError("You cannot invite yourself", field="email")

        async with self.uow:
            invitee = await self.user_repo.get_by_email(email)
            if invitee is not None:
                return await self._add_existing_user(invitee.id, project.id, email, cmd.role)
            return await self._create_invitation(project.id, email, cmd.role)

    async def _add_existing_user(
        self, user_id: UserId, project_id: ProjectId, email: str, role: CollaboratorRole
    ) -> InviteCollaboratorResult:
        existing = await self.collaboration_repo.get(user_id, project_id)
        if existing is not None:
            raise ConflictError(
                "This user is already a collaborator", code="already_collaborator"
            )

        await self.collaboration_repo.save(
            Collaboration.create(user_id=user_id, project_id=project_id, role=role)
        )
        logger.info(
            "Collaborator added: project_id=%s, user_id=%s, role=%s", project_id, user_id, role
        )
        return InviteCollaboratorResult(status=InvitationOutcome.ADDED, email=email, role=role)

    async def _create_invitation(
        self, project_id: ProjectId, email: str, role: CollaboratorRole
    ) -> InviteCollaboratorResult:
        existing = await self.invitation_repo.get_for_project(email, project_id)
        if existing is not None:
            raise ConflictError(
                "An invitation has already been sent to this email", code="already_invited"
            )

        invitation = PendingInvitation.create(email=email, project_id=project_id, role=role)
        await self.invitation_repo.save(invitation)
        logger.info(
            "Invitation created: project_id=%s, invitation_id=%s, role=%s",
            project_id,
            invitation.id,
            role,
        )
        return InviteCollaboratorResult(
            status=InvitationOutcome.INVITED,
            email=email,
            role=role,
            expires_at=invitation.expires_at,
        )
