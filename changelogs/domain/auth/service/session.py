"""Session service for cookie-bound sessions and login-attempt state."""

import hashlib
import hmac
import json
import logging
import secrets
import string
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal
from uuid import UUID

import jwt

from changelogs.config import SessionConfig
from changelogs.domain.auth.model.value import LoginAttemptState, UserId
from changelogs.domain.shared.error import UnauthenticatedError
from changelogs.domain.shared.service import Service

logger = logging.getLogger(__name__)

SESSION_COOKIE = "__session"
LOGIN_STATE_COOKIE = "__auth_state"

SESSION_AUDIENCE = "session"

RANDOM_ALPHABET = string.ascii_letters + string.digits
MIN_RANDOM_LENGTH = 32


def generate_random_string(length: int = MIN_RANDOM_LENGTH) -> str:
    """Generate an alphanumeric string from a cryptographically secure source.

    Args:
        length: Number of characters, at least MIN_RANDOM_LENGTH

    Raises:
        ValueError: If length is below MIN_RANDOM_LENGTH
    """
    if length < MIN_RANDOM_LENGTH:
        raise ValueError(f"Random strings must be at least {MIN_RANDOM_LENGTH} characters")
    return "".join(secrets.choice(RANDOM_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class CookieDirective:
    """Instruction to set (or expire) one cookie on a response."""

    name: str
    value: str
    max_age: int
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"
    secure: bool = False
    path: str = "/"

    @property
    def is_clear(self) -> bool:
        """True if this directive removes the cookie."""
        return self.max_age == 0


class SessionService(Service):
    """Service for the two cookies that carry authentication state.

    - Session cookie: a JWT (HS256) carrying only the user ID, 30 days
    - Login-state cookie: an HMAC-signed payload holding the state/nonce pair
      of one in-flight login, 10 minutes

    Nothing is stored server-side; a valid signature is the only proof.
    """

    _config: SessionConfig

    # -------------------------------------------------------------------------
    # Session cookie
    # -------------------------------------------------------------------------

    def issue_session(self, user_id: UserId) -> CookieDirective:
        """Create the session cookie for an authenticated user."""
        now = datetime.now(UTC)
        max_age = int(timedelta(days=self._config.session_max_age_days).total_seconds())

        payload = {
            "sub": str(user_id),
            "aud": SESSION_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int(now.timestamp()) + max_age,
        }
        token = jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

        return self._directive(SESSION_COOKIE, token, max_age)

    def read_session(self, cookies: Mapping[str, str]) -> UserId | None:
        """Return the session's user ID, or None if absent, expired or tampered."""
        token = cookies.get(SESSION_COOKIE)
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                audience=SESSION_AUDIENCE,
            )
            return UserId(UUID(payload["sub"]))
        except jwt.ExpiredSignatureError:
            logger.debug("Session cookie expired")
            return None
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
            logger.warning("Session cookie failed verification")
            return None

    def require_session(self, cookies: Mapping[str, str]) -> UserId:
        """Return the session's user ID.

        Raises:
            UnauthenticatedError: If there is no valid session
        """
        user_id = self.read_session(cookies)
        if user_id is None:
            raise UnauthenticatedError("Authentication required", code="missing_session")
        return user_id

    def clear_session(self) -> CookieDirective:
        """Expire the session cookie immediately."""
        return self._directive(SESSION_COOKIE, "", 0)

    # -------------------------------------------------------------------------
    # Login-attempt state cookie
    # -------------------------------------------------------------------------

    def issue_login_state(self, state: str, nonce: str) -> CookieDirective:
        """Create the short-lived cookie binding a login attempt to its state/nonce.

        The value is self-verifying: payload.signature, where the payload holds
        state, nonce and an expiry timestamp and the signature is HMAC-SHA256.
        """
        payload = {
            "state": state,
            "nonce": nonce,
            "exp": int(time.time()) + self._config.state_max_age_seconds,
        }
        payload_bytes = json.dumps(payload, separators=(",", ":")).encode()
        payload_b64 = urlsafe_b64encode(payload_bytes).rstrip(b"=").decode()

        signature = self._sign(payload_bytes)
        signature_b64 = urlsafe_b64encode(signature).rstrip(b"=").decode()

        return self._directive(
            LOGIN_STATE_COOKIE,
            f"{payload_b64}.{signature_b64}",
            self._config.state_max_age_seconds,
        )

    def read_login_state(self, cookies: Mapping[str, str]) -> LoginAttemptState | None:
        """Verify the login-state cookie.

        Returns:
            The state/nonce pair, or None if absent, tampered, expired or incomplete
        """
        value = cookies.get(LOGIN_STATE_COOKIE)
        if not value:
            return None

        parts = value.split(".")
        if len(parts) != 2:
            return None

        payload_b64, signature_b64 = parts
        try:
            # Restore base64 padding
            payload_bytes = urlsafe_b64decode(payload_b64 + "==")
            signature = urlsafe_b64decode(signature_b64 + "==")
        except ValueError:
            return None

        if not hmac.compare_digest(signature, self._sign(payload_bytes)):
            logger.warning("Login state signature verification failed")
            return None

        try:
            payload = json.loads(payload_bytes)
        except ValueError:
            return None

        if not isinstance(payload, dict):
            return None

        exp = payload.get("exp")
        if not isinstance(exp, int) or exp < time.time():
            logger.info("Login state expired")
            return None

        state = payload.get("state")
        nonce = payload.get("nonce")
        if not isinstance(state, str) or not isinstance(nonce, str) or not state or not nonce:
            return None

        return LoginAttemptState(state=state, nonce=nonce)

    def clear_login_state(self) -> CookieDirective:
        """Expire the login-state cookie immediately."""
        return self._directive(LOGIN_STATE_COOKIE, "", 0)

    # -------------------------------------------------------------------------

    def _sign(self, payload: bytes) -> bytes:
        return hmac.new(self._config.secret.encode(), payload, hashlib.sha256).digest()

    def _directive(self, name: str, value: str, max_age: int) -> CookieDirective:
        return CookieDirective(
            name=name,
            value=value,
            max_age=max_age,
            secure=self._config.secure_cookies,
        )
