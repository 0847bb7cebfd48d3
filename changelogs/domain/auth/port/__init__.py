"""Auth domain ports."""

from .identity_provider import IdentityProvider, ProviderConfig, TokenResponse
from .repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)

__all__ = [
    "CollaborationRepository",
    "IdentityProvider",
    "PendingInvitationRepository",
    "ProviderConfig",
    "TokenResponse",
    "UserRepository",
]
