"""User aggregate for the auth domain."""

from datetime import UTC, datetime

from changelogs.domain.auth.model.value import UserId
from changelogs.domain.shared.model.aggregate import Aggregate


class User(Aggregate):
    """A local account bound to an identity provider subject.

    Users are created on first login and refreshed on every later login.

    Invariants:
    - `subject` is unique; exactly one User per subject
    - `email` is unique; it moves to a new subject only via `link_subject`
    - `id` and `created_at` are immutable after creation
    """

    id: UserId
    subject: str
    email: str
    name: str | None = None
    picture: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        subject: str,
        email: str,
        name: str | None = None,
        picture: str | None = None,
    ) -> "User":
        """Create a new user."""
        now = datetime.now(UTC)
        return cls(
            id=UserId.generate(),
            subject=subject,
            email=email,
            name=name,
            picture=picture,
            created_at=now,
            updated_at=now,
        )

    def refresh_profile(self, email: str, name: str | None, picture: str | None) -> None:
        """Take the provider's latest profile values."""
        self.email = email
        self.name = name
        self.picture = picture
        self.updated_at = datetime.now(UTC)

    def link_subject(self, subject: str, name: str | None, picture: str | None) -> None:
        """Re-link this account to a new provider subject (e.g. after a provider migration)."""
        self.subject = subject
        self.name = name
        self.picture = picture
        self.updated_at = datetime.now(UTC)
