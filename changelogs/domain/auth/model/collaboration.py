"""Collaboration entity: a non-owner user's role on a project."""

from datetime import UTC, datetime
from enum import StrEnum

from changelogs.domain.auth.model.value import CollaborationId, ProjectId, UserId
from changelogs.domain.shared.model.entity import Entity


class CollaboratorRole(StrEnum):
    """Access granted to a collaborator."""

    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class Collaboration(Entity):
    """Binds a user to a project with a role.

    Invariants:
    - `(user_id, project_id)` is unique
    """

    id: CollaborationId
    user_id: UserId
    project_id: ProjectId
    role: CollaboratorRole
    created_at: datetime

    @classmethod
    def create(
        cls,
        user_id: UserId,
        project_id: ProjectId,
        role: CollaboratorRole,
    ) -> "Collaboration":
        return cls(
            id=CollaborationId.generate(),
            user_id=user_id,
            project_id=project_id,
            role=role,
            created_at=datetime.now(UTC),
        )

    def change_role(self, role: CollaboratorRole) -> None:
        self.role = role
