"""Identity token claim extraction.

The token's signature is NOT verified here. `parse_id_token` must only ever
see a TokenResponse returned by `IdentityProvider.exchange_code`, which
obtained it from the provider over a server-to-server channel and checked
its state, nonce, issuer, audience and expiry. Never call it on a token
supplied by the browser.
"""

import logging
from typing import Any

import jwt

from changelogs.domain.auth.model.value import ExternalIdentity
from changelogs.domain.auth.port.identity_provider import TokenResponse

logger = logging.getLogger(__name__)


def decode_token_payload(token: str) -> dict[str, Any] | None:
    """Decode the middle segment of a `header.payload.signature` token.

    Returns:
        The claim set, or None if the token is not three segments or its
        payload does not decode to a JSON object
    """
    if len(token.split(".")) != 3:
        return None

    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None

    return payload if isinstance(payload, dict) else None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_id_token(tokens: TokenResponse) -> ExternalIdentity | None:
    """Map an identity token's claims onto an ExternalIdentity.

    Args:
        tokens: Token response from a completed code exchange

    Returns:
        The identity, or None if the token is absent, malformed or has no subject
    """
    if not tokens.id_token:
        return None

    claims = decode_token_payload(tokens.id_token)
    if claims is None:
        logger.warning("Identity token is malformed")
        return None

    subject = _optional_str(claims.get("sub"))
    if subject is None:
        logger.warning("Identity token has no subject claim")
        return None

    return ExternalIdentity(
        subject=subject,
        email=_optional_str(claims.get("email")),
        name=_optional_str(claims.get("name")),
        picture=_optional_str(claims.get("picture")),
    )
