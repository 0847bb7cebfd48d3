"""Authentication routes for the OIDC login flow."""

import logging

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse, RedirectResponse

from changelogs.application.api.v1.routes.cookies import apply_cookie
from changelogs.config import Config
from changelogs.domain.auth.command.login import (
    CompleteLogin,
    CompleteLoginHandler,
    InitiateLogin,
    InitiateLoginHandler,
)
from changelogs.domain.auth.command.logout import Logout, LogoutHandler
from changelogs.domain.shared.error import InvalidStateError, MalformedIdentityError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"], route_class=DishkaRoute)

INVALID_STATE_MESSAGE = "Invalid auth state"
MISSING_IDENTITY_MESSAGE = "Failed to get user info"
AUTH_FAILED_MESSAGE = "Authentication failed"


@router.get("/login")
async def initiate_login(
    config: FromDishka[Config],
    handler: FromDishka[InitiateLoginHandler],
) -> Response:
    """Start a login attempt.

    Redirects to the identity provider's authorization page and binds the
    attempt to this browser with the login-state cookie.
    """
    result = await handler.run(InitiateLogin(redirect_uri=config.frontend.callback_url))

    response = RedirectResponse(url=result.authorization_url, status_code=302)
    apply_cookie(response, result.state_cookie)
    logger.info("Login initiated, redirecting to identity provider")
    return response


@router.get("/callback")
async def handle_callback(
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[CompleteLoginHandler],
) -> Response:
    """Handle the identity provider's redirect back.

    Every failure ends in a plaintext 400; provider detail is only logged.
    """
    try:
        result = await handler.run(
            CompleteLogin(
                callback_url=str(request.url),
                redirect_uri=config.frontend.callback_url,
                cookies=dict(request.cookies),
            )
        )
    except InvalidStateError:
        logger.warning("Login callback without a valid state cookie")
        return PlainTextResponse(INVALID_STATE_MESSAGE, status_code=400)
    except MalformedIdentityError as e:
        logger.warning("Login callback produced no usable identity: %s", e.code)
        return PlainTextResponse(MISSING_IDENTITY_MESSAGE, status_code=400)
    except Exception as e:
        logger.exception("Login callback failed: %s", e)
        return PlainTextResponse(AUTH_FAILED_MESSAGE, status_code=400)

    response = RedirectResponse(url=config.frontend.dashboard_path, status_code=302)
    apply_cookie(response, result.session_cookie)
    apply_cookie(response, result.clear_state_cookie)
    return response


@router.get("/logout")
async def logout(
    request: Request,
    config: FromDishka[Config],
    handler: FromDishka[LogoutHandler],
) -> Response:
    """End the session. Safe to call without one."""
    result = await handler.run(Logout(cookies=dict(request.cookies)))

    response = RedirectResponse(url=config.frontend.home_path, status_code=302)
    apply_cookie(response, result.clear_session_cookie)
    return response
