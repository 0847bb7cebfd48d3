"""Login commands for the OIDC authorization-code flow."""

import logging

from changelogs.domain.auth.port.identity_provider import IdentityProvider
from changelogs.domain.auth.service.account import AccountResolver
from changelogs.domain.auth.service.session import (
    CookieDirective,
    SessionService,
    generate_random_string,
)
from changelogs.domain.auth.service.token_parser import parse_id_token
from changelogs.domain.shared.command import Command, CommandHandler, Result
from changelogs.domain.shared.error import InvalidStateError, MalformedIdentityError

logger = logging.getLogger(__name__)


class InitiateLogin(Command):
    """Command to start a login attempt."""

    redirect_uri: str  # OIDC callback URL registered with the provider


class InitiateLoginResult(Result):
    """Result containing the provider URL and the login-state cookie."""

    authorization_url: str
    state_cookie: CookieDirective


class InitiateLoginHandler(CommandHandler[InitiateLogin, InitiateLoginResult]):
    """Handler for InitiateLogin command."""

    identity_provider: IdentityProvider
    session_service: SessionService

    async def run(self, cmd: InitiateLogin) -> InitiateLoginResult:
        """Generate state/nonce, bind them to a cookie and build the authorization URL."""
        state = generate_random_string()
        nonce = generate_random_string()

        authorization_url = await self.identity_provider.build_authorization_url(
            state=state,
            nonce=nonce,
            redirect_uri=cmd.redirect_uri,
        )

        return InitiateLoginResult(
            authorization_url=authorization_url,
            state_cookie=self.session_service.issue_login_state(state, nonce),
        )


class CompleteLogin(Command):
    """Command to complete a login attempt from the provider callback."""

    callback_url: str  # Full URL the provider redirected to (carries code and state)
    redirect_uri: str  # Must match the one used in the authorization URL
    cookies: dict[str, str]


class CompleteLoginResult(Result):
    """Result containing the authenticated user and the cookies to set."""

    user_id: str
    session_cookie: CookieDirective
    clear_state_cookie: CookieDirective


class CompleteLoginHandler(CommandHandler[CompleteLogin, CompleteLoginResult]):
    """Handler for CompleteLogin command.

    Raises:
        InvalidStateError: If the login-state cookie is missing or invalid
        AuthExchangeError: If the code exchange fails
        MalformedIdentityError: If no usable identity (with email) comes back
        PersistenceError: If the account cannot be stored
    """

    identity_provider: IdentityProvider
    session_service: SessionService
    account_resolver: AccountResolver

    async def run(self, cmd: CompleteLogin) -> CompleteLoginResult:
        """Exchange the code, resolve the local user and open a session."""
        login_state = self.session_service.read_login_state(cmd.cookies)
        if login_state is None:
            raise InvalidStateError("Invalid auth state", code="invalid_auth_state")

        tokens = await self.identity_provider.exchange_code(
            callback_url=cmd.callback_url,
            expected_state=login_state.state,
            expected_nonce=login_state.nonce,
            redirect_uri=cmd.redirect_uri,
        )

        identity = parse_id_token(tokens)
        if identity is None or not identity.email:
            raise MalformedIdentityError("Failed to get user info", code="missing_identity")

        user = await self.account_resolver.resolve(identity)

        logger.info("Login complete: user_id=%s", user.id)
        return CompleteLoginResult(
            user_id=str(user.id),
            session_cookie=self.session_service.issue_session(user.id),
            clear_state_cookie=self.session_service.clear_login_state(),
        )
