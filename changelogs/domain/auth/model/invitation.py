"""PendingInvitation entity for collaborators who have no account yet."""

from datetime import UTC, datetime, timedelta

from changelogs.domain.auth.model.collaboration import CollaboratorRole
from changelogs.domain.auth.model.value import InvitationId, ProjectId
from changelogs.domain.shared.model.entity import Entity

INVITATION_EXPIRY_DAYS = 30


class PendingInvitation(Entity):
    """An invitation addressed to an email that has no local account.

    Converted into a Collaboration when a user with this email signs up for
    the first time.

    Invariants:
    - `email` is stored lowercase
    - `(email, project_id)` is unique
    """

    id: InvitationId
    email: str
    project_id: ProjectId
    role: CollaboratorRole
    expires_at: datetime
    created_at: datetime

    @property
    def is_expired(self) -> bool:
        """Check if the invitation has passed its expiry."""
        return self.expires_at <= datetime.now(UTC)

    @classmethod
    def create(
        cls,
        email: str,
        project_id: ProjectId,
        role: CollaboratorRole,
        expires_in_days: int = INVITATION_EXPIRY_DAYS,
    ) -> "PendingInvitation":
        """Create a new invitation."""
        now = datetime.now(UTC)
        return cls(
            id=InvitationId.generate(),
            email=email.lower(),
            project_id=project_id,
            role=role,
            expires_at=now + timedelta(days=expires_in_days),
            created_at=now,
        )
