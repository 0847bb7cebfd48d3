"""Value objects for the auth domain."""

from dataclasses import dataclass

from changelogs.domain.shared.model.value import EntityId


class UserId(EntityId):
    """Unique identifier for a User."""


class ProjectId(EntityId):
    """Unique identifier for a Project."""


class InvitationId(EntityId):
    """Unique identifier for a PendingInvitation."""


class CollaborationId(EntityId):
    """Unique identifier for a Collaboration."""


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity claims read from a provider's identity token.

    Lives for the duration of one login callback. `email` may be missing when
    the provider omits the claim; the login flow rejects that case.
    """

    subject: str  # Provider's stable `sub` claim
    email: str | None
    name: str | None = None
    picture: str | None = None


@dataclass(frozen=True)
class LoginAttemptState:
    """Anti-forgery pair bound to one login attempt.

    Only ever stored in the signed, short-lived state cookie.
    """

    state: str
    nonce: str
