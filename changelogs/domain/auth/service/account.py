"""Account resolution: map a provider identity onto a local user."""

import logging

from changelogs.domain.auth.model.collaboration import Collaboration
from changelogs.domain.auth.model.user import User
from changelogs.domain.auth.model.value import ExternalIdentity, UserId
from changelogs.domain.auth.port.repository import (
    CollaborationRepository,
    PendingInvitationRepository,
    UserRepository,
)
from changelogs.domain.shared.error import (
    DuplicateAccountError,
    MalformedIdentityError,
    PersistenceError,
)
from changelogs.domain.shared.service import Service
from changelogs.domain.shared.uow import UnitOfWork

logger = logging.getLogger(__name__)


class AccountResolver(Service):
    """Finds or creates the local user for a verified external identity.

    Decision order (first match wins):
    1. A user with the same subject: refresh name, picture and email (the
       email stays put if another account already holds the new one)
    2. A user with the same email: re-link to the new subject, refresh name and picture
    3. Otherwise: create the user and convert its pending invitations into
       collaborations, all in one transaction

    A concurrent login that creates the same user first surfaces as
    DuplicateAccountError on step 3; the loser re-runs steps 1-2.
    """

    _user_repo: UserRepository
    _invitation_repo: PendingInvitationRepository
    _collaboration_repo: CollaborationRepository
    _uow: UnitOfWork

    async def resolve(self, identity: ExternalIdentity) -> User:
        """Materialize the local user for an identity.

        Raises:
            MalformedIdentityError: If the identity has no email
            PersistenceError: If storage fails
        """
        if not identity.email:
            raise MalformedIdentityError("Identity has no email", code="missing_email")

        async with self._uow:
            user = await self._match_existing(identity)
        if user is not None:
            return user

        try:
            async with self._uow:
                return await self._create_with_invitations(identity)
        except DuplicateAccountError:
            logger.info(
                "Concurrent signup detected, re-fetching user: subject=%s", identity.subject
            )

        async with self._uow:
            user = await self._match_existing(identity)
        if user is None:
            raise PersistenceError(
                "User creation conflicted but no matching user was found",
                code="duplicate_account_unresolved",
            )
        return user

    async def get_user(self, user_id: UserId) -> User | None:
        """Get a user by their ID."""
        return await self._user_repo.get(user_id)

    async def _match_existing(self, identity: ExternalIdentity) -> User | None:
        """Apply rules 1 and 2. Returns None if neither matches."""
        email = _normalize_email(identity.email)

        user = await self._user_repo.get_by_subject(identity.subject)
        if user is not None:
            if email != user.email and await self._email_taken(email, by_other_than=user.id):
                # Another account owns the new address; keep ours
                logger.warning(
                    "Email refresh skipped, address belongs to another user: user_id=%s",
                    user.id,
                )
                email = user.email
            user.refresh_profile(email=email, name=identity.name, picture=identity.picture)
            await self._user_repo.save(user)
            logger.info("User signed in: user_id=%s", user.id)
            return user

        user = await self._user_repo.get_by_email(email)
        if user is not None:
            previous_subject = user.subject
            user.link_subject(identity.subject, name=identity.name, picture=identity.picture)
            await self._user_repo.save(user)
            logger.info(
                "User re-linked to new subject: user_id=%s, old_subject=%s, new_subject=%s",
                user.id,
                previous_subject,
                identity.subject,
            )
            return user

        return None

    async def _email_taken(self, email: str, by_other_than: UserId) -> bool:
        holder = await self._user_repo.get_by_email(email)
        return holder is not None and holder.id != by_other_than

    async def _create_with_invitations(self, identity: ExternalIdentity) -> User:
        """Apply rule 3. Must run inside a single unit of work."""
        email = _normalize_email(identity.email)

        user = User.create(
            subject=identity.subject,
            email=email,
            name=identity.name,
            picture=identity.picture,
        )
        await self._user_repo.save(user)

        invitations = await self._invitation_repo.get_by_email(email)
        converted = 0
        for invitation in invitations:
            if invitation.is_expired:
                logger.info(
                    "Skipping expired invitation: invitation_id=%s, project_id=%s",
                    invitation.id,
                    invitation.project_id,
                )
                continue
            await self._collaboration_repo.save(
                Collaboration.create(
                    user_id=user.id,
                    project_id=invitation.project_id,
                    role=invitation.role,
                )
            )
            converted += 1

        deleted = await self._invitation_repo.delete_by_email(email)

        logger.info(
            "New user created: user_id=%s, invitations_converted=%d, invitations_removed=%d",
            user.id,
            converted,
            deleted,
        )
        return user


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()
