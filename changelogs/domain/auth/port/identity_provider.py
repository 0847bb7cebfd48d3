"""Identity provider port for the auth domain."""

from abc import abstractmethod
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from changelogs.domain.shared.port import Port


class ProviderConfig(BaseModel):
    """Endpoint configuration published by an OpenID Connect provider."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    userinfo_endpoint: str | None = None
    jwks_uri: str | None = None


class TokenResponse(BaseModel):
    """Token endpoint response of an authorization-code exchange."""

    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: str = "Bearer"
    id_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None


class IdentityProvider(Port, Protocol):
    """Port for the external OpenID Connect provider.

    The adapter lives in infrastructure/ (OidcIdentityProvider).
    """

    @abstractmethod
    async def discover(self) -> ProviderConfig:
        """Fetch the provider's endpoint configuration, cached after the first call.

        Raises:
            ConfigurationError: If discovery fails
        """
        ...

    @abstractmethod
    async def build_authorization_url(self, state: str, nonce: str, redirect_uri: str) -> str:
        """Build the URL that sends the browser to the provider's login page.

        Args:
            state: CSRF protection value (echoed back on the callback)
            nonce: Replay protection value (embedded in the identity token)
            redirect_uri: Where the provider should redirect after auth

        Returns:
            Full URL to redirect the user to
        """
        ...

    @abstractmethod
    async def exchange_code(
        self,
        callback_url: str,
        expected_state: str,
        expected_nonce: str,
        redirect_uri: str,
    ) -> TokenResponse:
        """Exchange the authorization code carried by `callback_url` for tokens.

        The callback's `state` must equal `expected_state` and the identity
        token's `nonce` must equal `expected_nonce`.

        Args:
            callback_url: The full URL the provider redirected the browser to
            expected_state: State stored in the login-attempt cookie
            expected_nonce: Nonce stored in the login-attempt cookie
            redirect_uri: Must match the redirect_uri used in the authorization URL

        Returns:
            Token response containing an identity token

        Raises:
            AuthExchangeError: On mismatch, provider rejection, or network failure
        """
        ...

    @abstractmethod
    async def fetch_user_info(self, access_token: str) -> dict[str, Any]:
        """Fetch claims from the provider's userinfo endpoint.

        Raises:
            AuthExchangeError: If the request fails
        """
        ...
