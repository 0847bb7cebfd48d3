"""DI provider for auth infrastructure."""

from typing import AsyncIterable

import httpx
from dishka import provide

from changelogs.config import Config
from changelogs.domain.auth.port.identity_provider import IdentityProvider
from changelogs.infrastructure.auth.oidc import OidcIdentityProvider
from changelogs.util.di.base import Provider
from changelogs.util.di.scope import Scope

# HTTP client timeout configuration
_HTTP_TIMEOUT = httpx.Timeout(
    connect=5.0,  # Connection timeout
    read=10.0,  # Read timeout
    write=5.0,  # Write timeout
    pool=5.0,  # Pool timeout
)


class AuthInfraProvider(Provider):
    """DI provider for auth infrastructure adapters.

    Args:
        transport: Optional httpx transport, used by tests to stand in for the provider
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        super().__init__()
        self._transport = transport

    @provide(scope=Scope.APP)
    async def get_auth_http_client(self) -> AsyncIterable[httpx.AsyncClient]:
        """Shared HTTP client for auth operations (connection pooling)."""
        async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT, transport=self._transport) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_identity_provider(
        self, config: Config, http_client: httpx.AsyncClient
    ) -> IdentityProvider:
        """One provider per process so the discovery document is fetched once."""
        return OidcIdentityProvider(config=config.auth.oidc, http_client=http_client)
