"""ListCollaborators query and handler."""

from datetime import datetime

from pydantic import BaseModel

from changelogs.domain.auth.model.collaboration import CollaboratorRole
from changelogs.domain.auth.model.user import User
from changelogs.domain.auth.model.value import UserId
from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)
from changelogs.domain.project.port.repository import ProjectRepository
from changelogs.domain.project.service.ownership import require_owned_project
from changelogs.domain.shared.error import UnauthenticatedError
from changelogs.domain.shared.query import Query, QueryHandler
from changelogs.domain.shared.query import Result as QueryResult


class ListCollaborators(Query):
    """Query for everyone with access to a project, plus outstanding invitations."""

    project_slug: str


class MemberDTO(BaseModel):
    user_id: str
    email: str
    name: str | None
    picture: str | None


class CollaboratorDTO(MemberDTO):
    id: str  # Collaboration ID, used to remove or re-role
    role: CollaboratorRole
    added_at: datetime


class InvitationDTO(BaseModel):
    id: str
    email: str
    role: CollaboratorRole
    expires_at: datetime
    created_at: datetime
    expired: bool


class ListCollaboratorsResult(QueryResult):
    owner: MemberDTO
    collaborators: list[CollaboratorDTO]
    pending_invitations: list[InvitationDTO]


def _member(user: User) -> dict:
    return {
        "user_id": str(user.id),
        "email": user.email,
        "name": user.name,
        "picture": user.picture,
    }


class ListCollaboratorsHandler(QueryHandler[ListCollaborators, ListCollaboratorsResult]):
    """Owner-only view of a project's collaborators and pending invitations."""

    current_user_id: UserId
    project_repo: ProjectRepository
    user_repo: UserRepository
    collaboration_repo: CollaborationRepository
    invitation_repo: PendingInvitationRepository

    async def run(self, query: ListCollaborators) -> ListCollaboratorsResult:
        project = await require_owned_project(
            self.project_repo, query.project_slug, self.current_user_id
        )

        owner = await self.user_repo.get(project.owner_id)
        if owner is None:
            # Session outlived the account
            raise UnauthenticatedError("User not found", code="user_not_found")

        collaborators = []
        for collaboration in await self.collaboration_repo.list_for_project(project.id):
            user = await self.user_repo.get(collaboration.user_id)
            if user is None:
                continue
            collaborators.append(
                CollaboratorDTO(
                    id=str(collaboration.id),
                    role=collaboration.role,
                    added_at=collaboration.created_at,
                    **_member(user),
                )
            )

        invitations = await self.invitation_repo.list_for_project(project.id)

        return ListCollaboratorsResult(
            owner=MemberDTO(**_member(owner)),
            collaborators=collaborators,
            pending_invitations=[
                InvitationDTO(
                    id=str(i.id),
                    email=i.email,
                    role=i.role,
                    expires_at=i.expires_at,
                    created_at=i.created_at,
                    expired=i.is_expired,
                )
                for i in invitations
            ],
        )
