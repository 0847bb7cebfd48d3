"""Auth domain models."""

from .collaboration import Collaboration, CollaboratorRole
from .invitation import PendingInvitation
from .user import User
from .value import (
    CollaborationId,
    ExternalIdentity,
    InvitationId,
    LoginAttemptState,
    ProjectId,
    UserId,
)

__all__ = [
    "Collaboration",
    "CollaborationId",
    "CollaboratorRole",
    "ExternalIdentity",
    "InvitationId",
    "LoginAttemptState",
    "PendingInvitation",
    "ProjectId",
    "User",
    "UserId",
]
