"""DI provider for auth domain."""

from dishka import from_context, provide
from starlette.requests import Request

from changelogs.config import Config
from changelogs.domain.auth.command.login import CompleteLoginHandler, InitiateLoginHandler
from changelogs.domain.auth.command.logout import LogoutHandler
from changelogs.domain.auth.model.value import UserId
from changelogs.domain.auth.service.account import AccountResolver
from changelogs.domain.auth.service.session import SessionService
from changelogs.domain.shared.error import ConfigurationError
from changelogs.util.di.base import Provider
from changelogs.util.di.scope import Scope


class AuthProvider(Provider):
    """DI provider for auth domain services and handlers."""

    request = from_context(provides=Request, scope=Scope.UOW)

    # Command Handlers
    initiate_login_handler = provide(InitiateLoginHandler, scope=Scope.UOW)
    complete_login_handler = provide(CompleteLoginHandler, scope=Scope.UOW)
    logout_handler = provide(LogoutHandler, scope=Scope.UOW)

    # Services
    account_resolver = provide(AccountResolver, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_session_service(self, config: Config) -> SessionService:
        """Provide SessionService.

        Raises:
            ConfigurationError: If no session secret is configured
        """
        if not config.auth.session.secret:
            raise ConfigurationError(
                "CHANGELOGS_AUTH__SESSION__SECRET must be set",
                code="missing_session_secret",
            )
        return SessionService(_config=config.auth.session)

    @provide(scope=Scope.UOW)
    def get_current_user_id(self, request: Request, session_service: SessionService) -> UserId:
        """Resolve the signed-in user from the session cookie.

        Raises:
            UnauthenticatedError: If there is no valid session
        """
        return session_service.require_session(request.cookies)
