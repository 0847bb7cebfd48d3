"""Project domain commands."""

from .invite import (
    InvitationOutcome,
    InviteCollaborator,
    InviteCollaboratorHandler,
    InviteCollaboratorResult,
)

__all__ = [
    "InvitationOutcome",
    "InviteCollaborator",
    "InviteCollaboratorHandler",
    "InviteCollaboratorResult",
]
