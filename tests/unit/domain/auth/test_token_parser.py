"""Unit tests for identity token claim extraction."""

import json
from base64 import urlsafe_b64encode

import jwt

from changelogs.domain.auth.port.identity_provider import TokenResponse
from changelogs.domain.auth.service.token_parser import decode_token_payload, parse_id_token


def _segment(data: dict | str) -> str:
    raw = data if isinstance(data, str) else json.dumps(data)
    return urlsafe_b64encode(raw.encode()).rstrip(b"=").decode()


HEADER = _segment({"alg": "RS256", "typ": "JWT"})


def make_token(claims: dict) -> str:
    """Sign with a throwaway key; the parser never checks signatures."""
    return jwt.encode(claims, "throwaway-signing-key-for-parser-tests", algorithm="HS256")


def tokens_with(id_token: str | None) -> TokenResponse:
    return TokenResponse(access_token="access", id_token=id_token)


class TestDecodeTokenPayload:
    def test_decodes_unpadded_payload(self):
        """Payloads of any length decode without explicit padding."""
        for sub in ("a", "ab", "abc", "abcd"):
            assert decode_token_payload(make_token({"sub": sub})) == {"sub": sub}

    def test_rejects_wrong_segment_count(self):
        assert decode_token_payload("only.two") is None
        assert decode_token_payload("a.b.c.d") is None
        assert decode_token_payload("") is None

    def test_rejects_non_json_payload(self):
        assert decode_token_payload(f"{HEADER}.{_segment('not json')}.sig") is None

    def test_rejects_non_object_payload(self):
        assert decode_token_payload(f"{HEADER}.{_segment('[1, 2]')}.sig") is None

    def test_rejects_invalid_base64(self):
        assert decode_token_payload(f"{HEADER}.!!!.sig") is None


class TestParseIdToken:
    def test_maps_claims_to_identity(self):
        token = make_token(
            {
                "sub": "u1",
                "email": "e@test.com",
                "name": "Ada",
                "picture": "https://img.example.com/ada.png",
            }
        )

        identity = parse_id_token(tokens_with(token))

        assert identity is not None
        assert identity.subject == "u1"
        assert identity.email == "e@test.com"
        assert identity.name == "Ada"
        assert identity.picture == "https://img.example.com/ada.png"

    def test_optional_claims_default_to_none(self):
        identity = parse_id_token(tokens_with(make_token({"sub": "u1"})))

        assert identity is not None
        assert identity.email is None
        assert identity.name is None
        assert identity.picture is None

    def test_returns_none_without_id_token(self):
        assert parse_id_token(tokens_with(None)) is None

    def test_returns_none_for_malformed_token(self):
        assert parse_id_token(tokens_with("not-a-jwt")) is None

    def test_returns_none_without_subject(self):
        assert parse_id_token(tokens_with(make_token({"email": "e@test.com"}))) is None

    def test_non_string_claims_are_ignored(self):
        identity = parse_id_token(tokens_with(make_token({"sub": "u1", "email": 42})))

        assert identity is not None
        assert identity.email is None
