"""Project collaborator routes (owner only)."""

from datetime import datetime
from uuid import UUID

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from pydantic import BaseModel

from changelogs.domain.auth.model.collaboration import CollaboratorRole
from changelogs.domain.auth.model.value import CollaborationId, InvitationId
from changelogs.domain.project.command.invite import (
    InviteCollaborator,
    InviteCollaboratorHandler,
)
from changelogs.domain.project.command.manage import (
    CancelInvitation,
    CancelInvitationHandler,
    RemoveCollaborator,
    RemoveCollaboratorHandler,
    UpdateCollaboratorRole,
    UpdateCollaboratorRoleHandler,
)
from changelogs.domain.project.query.list_collaborators import (
    ListCollaborators,
    ListCollaboratorsHandler,
    ListCollaboratorsResult,
)

router = APIRouter(prefix="/projects", tags=["Projects"], route_class=DishkaRoute)


class InviteCollaboratorRequest(BaseModel):
    """Request body for inviting a collaborator."""

    email: str
    role: CollaboratorRole = CollaboratorRole.EDITOR


class InviteCollaboratorResponse(BaseModel):
    status: str  # "added" or "invited"
    email: str
    role: CollaboratorRole
    expires_at: datetime | None = None


@router.post(
    "/{slug}/collaborators",
    response_model=InviteCollaboratorResponse,
    status_code=201,
)
async def invite_collaborator(
    slug: str,
    body: InviteCollaboratorRequest,
    handler: FromDishka[InviteCollaboratorHandler],
) -> InviteCollaboratorResponse:
    """Add an existing user to the project, or invite an email that has no account."""
    result = await handler.run(
        InviteCollaborator(project_slug=slug, email=body.email, role=body.role)
    )
    return InviteCollaboratorResponse(
        status=result.status.value,
        email=result.email,
        role=result.role,
        expires_at=result.expires_at,
    )


@router.get("/{slug}/collaborators", response_model=ListCollaboratorsResult)
async def list_collaborators(
    slug: str,
    handler: FromDishka[ListCollaboratorsHandler],
) -> ListCollaboratorsResult:
    """List the owner, collaborators and pending invitations of a project."""
    return await handler.run(ListCollaborators(project_slug=slug))


class UpdateRoleRequest(BaseModel):
    role: CollaboratorRole


class CollaboratorRoleResponse(BaseModel):
    id: str
    user_id: str
    role: CollaboratorRole


@router.patch(
    "/{slug}/collaborators/{collaboration_id}",
    response_model=CollaboratorRoleResponse,
)
async def update_collaborator_role(
    slug: str,
    collaboration_id: UUID,
    body: UpdateRoleRequest,
    handler: FromDishka[UpdateCollaboratorRoleHandler],
) -> CollaboratorRoleResponse:
    result = await handler.run(
        UpdateCollaboratorRole(
            project_slug=slug,
            collaboration_id=CollaborationId(collaboration_id),
            role=body.role,
        )
    )
    return CollaboratorRoleResponse(
        id=str(result.collaboration_id),
        user_id=str(result.user_id),
        role=result.role,
    )


@router.delete("/{slug}/collaborators/{collaboration_id}", status_code=204)
async def remove_collaborator(
    slug: str,
    collaboration_id: UUID,
    handler: FromDishka[RemoveCollaboratorHandler],
) -> None:
    await handler.run(
        RemoveCollaborator(project_slug=slug, collaboration_id=CollaborationId(collaboration_id))
    )


@router.delete("/{slug}/invitations/{invitation_id}", status_code=204)
async def cancel_invitation(
    slug: str,
    invitation_id: UUID,
    handler: FromDishka[CancelInvitationHandler],
) -> None:
    await handler.run(
        CancelInvitation(project_slug=slug, invitation_id=InvitationId(invitation_id))
    )
