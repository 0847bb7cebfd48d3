"""Unit tests for session and login-state cookies."""

import time
from uuid import uuid4

import jwt
import pytest

from changelogs.config import SessionConfig
from changelogs.domain.auth.model.value import UserId
from changelogs.domain.auth.service import session as session_module
from changelogs.domain.auth.service.session import (
    LOGIN_STATE_COOKIE,
    MIN_RANDOM_LENGTH,
    RANDOM_ALPHABET,
    SESSION_COOKIE,
    SessionService,
    generate_random_string,
)
from changelogs.domain.shared.error import UnauthenticatedError

SECRET = "test-secret-key-for-signing-min-32"


@pytest.fixture
def session_service() -> SessionService:
    return SessionService(_config=SessionConfig(secret=SECRET))


@pytest.fixture
def session_service_alt_secret() -> SessionService:
    return SessionService(_config=SessionConfig(secret="different-secret-key-for-testing"))


class TestGenerateRandomString:
    def test_default_length_and_alphabet(self):
        value = generate_random_string()

        assert len(value) == MIN_RANDOM_LENGTH
        assert all(c in RANDOM_ALPHABET for c in value)

    def test_values_are_unique(self):
        assert len({generate_random_string() for _ in range(50)}) == 50

    def test_rejects_short_length(self):
        with pytest.raises(ValueError):
            generate_random_string(16)


class TestSessionCookie:
    def test_issue_then_read_returns_user(self, session_service: SessionService):
        user_id = UserId(uuid4())

        directive = session_service.issue_session(user_id)

        assert directive.name == SESSION_COOKIE
        assert directive.http_only is True
        assert directive.same_site == "lax"
        assert directive.max_age == 30 * 24 * 60 * 60
        assert session_service.read_session({SESSION_COOKIE: directive.value}) == user_id

    def test_token_carries_only_subject_and_timing(self, session_service: SessionService):
        user_id = UserId(uuid4())
        token = session_service.issue_session(user_id).value

        payload = jwt.decode(token, SECRET, algorithms=["HS256"], audience="session")

        assert payload["sub"] == str(user_id)
        assert set(payload) == {"sub", "aud", "iat", "exp"}

    def test_missing_cookie_returns_none(self, session_service: SessionService):
        assert session_service.read_session({}) is None

    def test_tampered_token_returns_none(self, session_service: SessionService):
        token = session_service.issue_session(UserId(uuid4())).value
        header, payload, signature = token.split(".")
        tampered_signature = ("A" if signature[0] != "A" else "B") + signature[1:]
        tampered = f"{header}.{payload}.{tampered_signature}"

        assert session_service.read_session({SESSION_COOKIE: tampered}) is None

    def test_wrong_secret_returns_none(
        self, session_service: SessionService, session_service_alt_secret: SessionService
    ):
        token = session_service.issue_session(UserId(uuid4())).value

        assert session_service_alt_secret.read_session({SESSION_COOKIE: token}) is None

    def test_expired_token_returns_none(self, session_service: SessionService):
        token = jwt.encode(
            {"sub": str(uuid4()), "aud": "session", "exp": int(time.time()) - 10},
            SECRET,
            algorithm="HS256",
        )

        assert session_service.read_session({SESSION_COOKIE: token}) is None

    def test_non_uuid_subject_returns_none(self, session_service: SessionService):
        token = jwt.encode(
            {"sub": "not-a-uuid", "aud": "session", "exp": int(time.time()) + 60},
            SECRET,
            algorithm="HS256",
        )

        assert session_service.read_session({SESSION_COOKIE: token}) is None

    def test_require_session_raises_without_cookie(self, session_service: SessionService):
        with pytest.raises(UnauthenticatedError) as exc_info:
            session_service.require_session({})

        assert exc_info.value.code == "missing_session"

    def test_clear_session_expires_cookie(self, session_service: SessionService):
        directive = session_service.clear_session()

        assert directive.name == SESSION_COOKIE
        assert directive.is_clear
        assert directive.value == ""

    def test_secure_flag_follows_config(self):
        service = SessionService(_config=SessionConfig(secret=SECRET, secure_cookies=True))

        assert service.issue_session(UserId(uuid4())).secure is True
        assert service.clear_session().secure is True


class TestLoginStateCookie:
    def test_round_trip(self, session_service: SessionService):
        directive = session_service.issue_login_state("S1", "N1")

        assert directive.name == LOGIN_STATE_COOKIE
        assert directive.max_age == 600

        state = session_service.read_login_state({LOGIN_STATE_COOKIE: directive.value})
        assert state is not None
        assert state.state == "S1"
        assert state.nonce == "N1"

    def test_value_is_url_safe(self, session_service: SessionService):
        value = session_service.issue_login_state("S1", "N1").value

        allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.")
        assert all(c in allowed for c in value)

    def test_missing_cookie_returns_none(self, session_service: SessionService):
        assert session_service.read_login_state({}) is None

    def test_tampered_payload_returns_none(self, session_service: SessionService):
        value = session_service.issue_login_state("S1", "N1").value
        payload, signature = value.split(".")
        tampered = ("x" if payload[0] != "x" else "y") + payload[1:]

        cookies = {LOGIN_STATE_COOKIE: f"{tampered}.{signature}"}
        assert session_service.read_login_state(cookies) is None

    def test_wrong_secret_returns_none(
        self, session_service: SessionService, session_service_alt_secret: SessionService
    ):
        value = session_service.issue_login_state("S1", "N1").value

        assert session_service_alt_secret.read_login_state({LOGIN_STATE_COOKIE: value}) is None

    def test_malformed_value_returns_none(self, session_service: SessionService):
        assert session_service.read_login_state({LOGIN_STATE_COOKIE: "no-dot"}) is None
        assert session_service.read_login_state({LOGIN_STATE_COOKIE: "a.b.c"}) is None

    def test_expired_state_returns_none(
        self, session_service: SessionService, monkeypatch: pytest.MonkeyPatch
    ):
        value = session_service.issue_login_state("S1", "N1").value

        # Jump past the 10 minute window
        real_time = time.time
        monkeypatch.setattr(session_module.time, "time", lambda: real_time() + 601)

        assert session_service.read_login_state({LOGIN_STATE_COOKIE: value}) is None

    def test_clear_login_state_expires_cookie(self, session_service: SessionService):
        directive = session_service.clear_login_state()

        assert directive.name == LOGIN_STATE_COOKIE
        assert directive.is_clear
