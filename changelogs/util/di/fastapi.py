"""Dishka integration that opens one Scope.UOW container per HTTP request."""

from dishka import AsyncContainer
from fastapi import FastAPI
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Send
from starlette.types import Scope as AsgiScope

from changelogs.util.di.scope import Scope


class ContainerMiddleware:
    """ASGI middleware that enters a request-bound Scope.UOW container.

    Stands in for dishka's starlette middleware, which only knows
    dishka.Scope.REQUEST. The Request is exposed as container context so
    providers can read cookies from it. Lifespan and other non-HTTP
    traffic passes straight through.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: AsgiScope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive, send=send)
        app_container: AsyncContainer = request.app.state.dishka_container

        async with app_container({Request: request}, scope=Scope.UOW) as request_container:
            request.state.dishka_container = request_container
            await self.app(scope, receive, send)


def setup_dishka(container: AsyncContainer, app: FastAPI) -> None:
    """Attach the container to the app and install the per-request middleware."""
    app.add_middleware(ContainerMiddleware)
    app.state.dishka_container = container
