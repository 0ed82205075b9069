"""Unit tests for JWT handler."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError
from src.pm_gateway.auth.jwt_handler import create_access_token, decode_token


def _encode(payload: dict, secret: str | None = None) -> str:
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("user-123")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "access"


def test_decode_valid_access_token() -> None:
    payload = decode_token(create_access_token("user-abc"))
    assert payload["sub"] == "user-abc"


def test_untyped_provider_token_accepted() -> None:
    exp = datetime.now(UTC) + timedelta(minutes=5)
    payload = decode_token(_encode({"sub": "idp|42", "exp": exp}))
    assert payload["sub"] == "idp|42"


def test_refresh_token_rejected() -> None:
    token = _encode({"sub": "u", "type": "refresh"})
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_expired_token_rejected() -> None:
    token = create_access_token("u", expires_in=timedelta(seconds=-1))
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_wrong_secret_rejected() -> None:
    token = _encode({"sub": "u"}, secret="someone-else")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_missing_subject_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(_encode({"type": "access"}))


def test_garbage_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token("not.a.jwt")
