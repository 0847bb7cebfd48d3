"""OpenID Connect identity provider adapter."""

import logging
import time
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit

import httpx
import jwt

from changelogs.config import OidcConfig
from changelogs.domain.auth.port.identity_provider import (
    IdentityProvider,
    ProviderConfig,
    TokenResponse,
)
from changelogs.domain.shared.error import AuthExchangeError, ConfigurationError

logger = logging.getLogger(__name__)

# Allowed clock drift when checking identity token expiry
CLOCK_SKEW_SECONDS = 60


class OidcIdentityProvider(IdentityProvider):
    """IdentityProvider implementation for any OIDC-compliant provider.

    Endpoints come from the issuer's discovery document, fetched on first use
    and kept for the lifetime of this instance (one per process via DI).
    """

    def __init__(self, config: OidcConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client
        self._provider_config: ProviderConfig | None = None

    async def discover(self) -> ProviderConfig:
        """Fetch and cache the provider's discovery document."""
        if self._provider_config is not None:
            return self._provider_config

        if not self._config.issuer or not self._config.client_id:
            raise ConfigurationError(
                "OIDC issuer and client id must be configured",
                code="oidc_not_configured",
            )

        try:
            response = await self._http.get(
                self._config.discovery_url,
                headers={"Accept": "application/json"},
            )
        except httpx.RequestError as e:
            logger.exception("OIDC discovery request failed: %s", e)
            raise ConfigurationError(
                "Failed to connect to identity provider",
                code="oidc_discovery_failed",
            ) from e

        if response.status_code != 200:
            logger.error(
                "OIDC discovery failed: url=%s, status=%d",
                self._config.discovery_url,
                response.status_code,
            )
            raise ConfigurationError(
                f"OIDC discovery failed: {response.status_code}",
                code="oidc_discovery_failed",
            )

        try:
            provider_config = ProviderConfig.model_validate(response.json())
        except ValueError as e:
            logger.error("OIDC discovery document is invalid: %s", e)
            raise ConfigurationError(
                "OIDC discovery document is invalid",
                code="oidc_discovery_failed",
            ) from e

        # Concurrent first callers may both get here; their results are interchangeable
        self._provider_config = provider_config
        logger.info("OIDC provider discovered: issuer=%s", provider_config.issuer)
        return provider_config

    async def build_authorization_url(self, state: str, nonce: str, redirect_uri: str) -> str:
        """Generate the provider authorization URL."""
        provider_config = await self.discover()

        params = {
            "response_type": "code",
            "client_id": self._config.client_id,
            "redirect_uri": redirect_uri,
            "scope": self._config.scope,
            "state": state,
            "nonce": nonce,
        }
        endpoint = provider_config.authorization_endpoint
        separator = "&" if "?" in endpoint else "?"
        return f"{endpoint}{separator}{urlencode(params)}"

    async def exchange_code(
        self,
        callback_url: str,
        expected_state: str,
        expected_nonce: str,
        redirect_uri: str,
    ) -> TokenResponse:
        """Exchange the callback's authorization code for tokens."""
        provider_config = await self.discover()

        query = dict(parse_qsl(urlsplit(callback_url).query))

        if "error" in query:
            logger.warning(
                "Provider returned error on callback: %s - %s",
                query["error"],
                query.get("error_description"),
            )
            raise AuthExchangeError("Provider rejected the login", code="provider_error")

        if query.get("state") != expected_state:
            logger.warning("OAuth state mismatch on callback")
            raise AuthExchangeError("State mismatch", code="state_mismatch")

        code = query.get("code")
        if not code:
            raise AuthExchangeError("Authorization code not provided", code="missing_code")

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
        }

        try:
            response = await self._http.post(
                provider_config.token_endpoint,
                data=data,
                headers={"Accept": "application/json"},
            )
        except httpx.RequestError as e:
            logger.exception("OIDC token request failed: %s", e)
            raise AuthExchangeError(
                "Failed to connect to identity provider",
                code="idp_unavailable",
            ) from e

        if response.status_code != 200:
            logger.error(
                "OIDC token exchange failed: status=%d, body=%s",
                response.status_code,
                response.text,
            )
            raise AuthExchangeError(
                f"OIDC token exchange failed: {response.status_code}",
                code="token_exchange_failed",
            )

        try:
            tokens = TokenResponse.model_validate(response.json())
        except ValueError as e:
            logger.error("OIDC token response is invalid: %s", e)
            raise AuthExchangeError(
                "OIDC token response is invalid",
                code="token_exchange_failed",
            ) from e

        if not tokens.id_token:
            raise AuthExchangeError("OIDC token response has no id_token", code="missing_id_token")

        self._check_id_token(tokens.id_token, expected_nonce, provider_config)
        return tokens

    async def fetch_user_info(self, access_token: str) -> dict[str, Any]:
        """Fetch claims from the userinfo endpoint."""
        provider_config = await self.discover()
        if not provider_config.userinfo_endpoint:
            raise ConfigurationError(
                "Provider does not publish a userinfo endpoint",
                code="oidc_no_userinfo",
            )

        try:
            response = await self._http.get(
                provider_config.userinfo_endpoint,
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.RequestError as e:
            logger.exception("OIDC userinfo request failed: %s", e)
            raise AuthExchangeError(
                "Failed to connect to identity provider",
                code="idp_unavailable",
            ) from e

        if response.status_code != 200:
            logger.error("OIDC userinfo failed: status=%d", response.status_code)
            raise AuthExchangeError(
                f"OIDC userinfo failed: {response.status_code}",
                code="userinfo_failed",
            )

        try:
            claims = response.json()
        except ValueError as e:
            raise AuthExchangeError("OIDC userinfo is invalid", code="userinfo_failed") from e

        if not isinstance(claims, dict):
            raise AuthExchangeError("OIDC userinfo is invalid", code="userinfo_failed")
        return claims

    def _check_id_token(
        self, id_token: str, expected_nonce: str, provider_config: ProviderConfig
    ) -> None:
        """Check nonce, issuer, audience and expiry of an identity token.

        The token came straight from the token endpoint over TLS, so its
        signature is not re-verified here.
        """
        try:
            claims = jwt.decode(id_token, options={"verify_signature": False})
        except jwt.DecodeError as e:
            raise AuthExchangeError("Identity token is malformed", code="invalid_id_token") from e

        if claims.get("nonce") != expected_nonce:
            logger.warning("Identity token nonce mismatch")
            raise AuthExchangeError("Nonce mismatch", code="nonce_mismatch")

        if claims.get("iss") != provider_config.issuer:
            logger.warning("Identity token issuer mismatch: iss=%s", claims.get("iss"))
            raise AuthExchangeError("Issuer mismatch", code="issuer_mismatch")

        audience = claims.get("aud")
        audiences = audience if isinstance(audience, list) else [audience]
        if self._config.client_id not in audiences:
            logger.warning("Identity token audience mismatch")
            raise AuthExchangeError("Audience mismatch", code="audience_mismatch")

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or exp + CLOCK_SKEW_SECONDS < time.time():
            raise AuthExchangeError("Identity token expired", code="id_token_expired")
