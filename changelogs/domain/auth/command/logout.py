"""Logout command."""

import logging

from changelogs.domain.auth.service.session import CookieDirective, SessionService
from changelogs.domain.shared.command import Command, CommandHandler, Result

logger = logging.getLogger(__name__)


class Logout(Command):
    """Command to end the current session. Valid with or without a session."""

    cookies: dict[str, str]


class LogoutResult(Result):
    """Result for logout operation."""

    clear_session_cookie: CookieDirective


class LogoutHandler(CommandHandler[Logout, LogoutResult]):
    """Handler for Logout command."""

    session_service: SessionService

    async def run(self, cmd: Logout) -> LogoutResult:
        """Expire the session cookie unconditionally."""
        user_id = self.session_service.read_session(cmd.cookies)
        if user_id is not None:
            logger.info("User logged out: user_id=%s", user_id)

        return LogoutResult(clear_session_cookie=self.session_service.clear_session())
