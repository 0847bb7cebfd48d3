"""Owner commands on existing collaborations and pending invitations."""

import logging

from changelogs.domain.auth.model.collaboration import Collaboration, CollaboratorRole
from changelogs.domain.auth.model.value import CollaborationId, InvitationId, ProjectId, UserId
from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
)
from changelogs.domain.project.port.repository import ProjectRepository
from changelogs.domain.project.service.ownership import require_owned_project
from changelogs.domain.shared.command import Command, CommandHandler, Result
from changelogs.domain.shared.error import NotFoundError
from changelogs.domain.shared.uow import UnitOfWork

logger = logging.getLogger(__name__)


class CancelInvitation(Command):
    project_slug: str
    invitation_id: InvitationId


class CancelInvitationResult(Result):
    invitation_id: InvitationId


class CancelInvitationHandler(CommandHandler[CancelInvitation, CancelInvitationResult]):
    """Withdraw a pending invitation before the invitee signs up."""

    current_user_id: UserId
    project_repo: ProjectRepository
    invitation_repo: PendingInvitationRepository
    uow: UnitOfWork

    async def run(self, cmd: CancelInvitation) -> CancelInvitationResult:
        project = await require_owned_project(
            self.project_repo, cmd.project_slug, self.current_user_id
        )

        async with self.uow:
            invitation = await self.invitation_repo.get(cmd.invitation_id)
            # IDs from another project are reported as missing
            if invitation is None or invitation.project_id != project.id:
                raise NotFoundError("Invitation not found", code="invitation_not_found")
            await self.invitation_repo.delete(invitation.id)

        logger.info(
            "Invitation cancelled: project_id=%s, invitation_id=%s", project.id, invitation.id
        )
        return CancelInvitationResult(invitation_id=invitation.id)


async def _project_collaboration(
    repo: CollaborationRepository, collaboration_id: CollaborationId, project_id: ProjectId
) -> Collaboration:
    collaboration = await repo.get_by_id(collaboration_id)
    if collaboration is None or collaboration.project_id != project_id:
        raise NotFoundError("Collaborator not found", code="collaborator_not_found")
    return collaboration


class RemoveCollaborator(Command):
    project_slug: str
    collaboration_id: CollaborationId


class RemoveCollaboratorResult(Result):
    collaboration_id: CollaborationId
    user_id: UserId


class RemoveCollaboratorHandler(CommandHandler[RemoveCollaborator, RemoveCollaboratorResult]):
    current_user_id: UserId
    project_repo: ProjectRepository
    collaboration_repo: CollaborationRepository
    uow: UnitOfWork

    async def run(self, cmd: RemoveCollaborator) -> RemoveCollaboratorResult:
        project = await require_owned_project(
            self.project_repo, cmd.project_slug, self.current_user_id
        )

        async with self.uow:
            collaboration = await _project_collaboration(
                self.collaboration_repo, cmd.collaboration_id, project.id
            )
            await self.collaboration_repo.delete(collaboration.id)

        logger.info(
            "Collaborator removed: project_id=%s, user_id=%s", project.id, collaboration.user_id
        )
        return RemoveCollaboratorResult(
            collaboration_id=collaboration.id, user_id=collaboration.user_id
        )


class UpdateCollaboratorRole(Command):
    project_slug: str
    collaboration_id: CollaborationId
    role: CollaboratorRole


class UpdateCollaboratorRoleResult(Result):
    collaboration_id: CollaborationId
    user_id: UserId
    role: CollaboratorRole


class UpdateCollaboratorRoleHandler(
    CommandHandler[UpdateCollaboratorRole, UpdateCollaboratorRoleResult]
):
    current_user_id: UserId
    project_repo: ProjectRepository
    collaboration_repo: CollaborationRepository
    uow: UnitOfWork

    async def run(self, cmd: UpdateCollaboratorRole) -> UpdateCollaboratorRoleResult:
        project = await require_owned_project(
            self.project_repo, cmd.project_slug, self.current_user_id
        )

        async with self.uow:
            collaboration = await _project_collaboration(
                self.collaboration_repo, cmd.collaboration_id, project.id
            )
            collaboration.change_role(cmd.role)
            await self.collaboration_repo.save(collaboration)

        logger.info(
            "Collaborator role updated: project_id=%s, user_id=%s, role=%s",
            project.id,
            collaboration.user_id,
            cmd.role,
        )
        return UpdateCollaboratorRoleResult(
            collaboration_id=collaboration.id,
            user_id=collaboration.user_id,
            role=collaboration.role,
        )
