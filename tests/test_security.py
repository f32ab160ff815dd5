from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from starlette.requests import Request

from learnix.core import security
from learnix.core.config import settings
from learnix.core.context import build_context

SECRET = "test-signing-key"


@pytest.fixture(autouse=True)
def hs256_settings(monkeypatch):
    monkeypatch.setattr(settings, "identity_jwt_key", SECRET)
    monkeypatch.setattr(settings, "identity_jwt_algorithm", "HS256")


def make_request(headers: dict) -> Request:
    raw = [(key.lower().encode(), value.encode()) for key, value in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def make_token(claims: dict) -> str:
    return jwt.encode(claims, SECRET, algorithm="HS256")


def test_extract_prefers_authorization_header():
    request = make_request({"Authorization": "Bearer header-token", "Cookie": "__session=cookie-token"})
    assert security.extract_session_token(request) == "header-token"


def test_extract_falls_back_to_session_cookie():
    request = make_request({"Cookie": "__session=cookie-token"})
    assert security.extract_session_token(request) == "cookie-token"


def test_extract_returns_none_without_credentials():
    assert security.extract_session_token(make_request({})) is None


def test_decode_valid_token_returns_claims():
    token = make_token({"sub": "user_abc", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)})
    claims = security.decode_session_token(token)
    assert claims is not None
    assert claims["sub"] == "user_abc"


def test_decode_rejects_expired_tampered_or_subjectless_tokens():
    expired = make_token({"sub": "user_abc", "exp": datetime.now(timezone.utc) - timedelta(minutes=5)})
    assert security.decode_session_token(expired) is None
    assert security.decode_session_token("not-a-token") is None
    assert security.decode_session_token(make_token({"role": "admin"})) is None


def test_context_only_forwards_verified_tokens():
    good = make_token({"sub": "user_abc"})
    ctx = build_context(good)
    assert ctx.external_id == "user_abc"
    assert ctx.auth_token == good

    bad = build_context("forged")
    assert bad.external_id is None
    assert bad.auth_token is None
