"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from src.ct_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.ct_gateway.auth.jwt_handler import (
    _LIFETIMES,
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_carries_subject_role_and_type() -> None:
    token = create_access_token("user-123", "seller")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["role"] == "seller"
    assert payload["type"] == "access"


def test_refresh_token_carries_role() -> None:
    payload = jwt.get_unverified_claims(create_refresh_token("user-123", "buyer"))
    assert payload["type"] == "refresh"
    assert payload["role"] == "buyer"


def test_decode_valid_access_token() -> None:
    payload = decode_token(create_access_token("user-abc", "admin"), expected_type="access")
    assert payload["sub"] == "user-abc"
    assert payload["role"] == "admin"


def test_access_token_used_as_refresh_raises_error() -> None:
    token = create_access_token("user-abc", "buyer")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_refresh_token_used_as_access_raises_error() -> None:
    token = create_refresh_token("user-abc", "buyer")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_access_token_raises_credentials_error() -> None:
    with patch.dict(_LIFETIMES, {"access": timedelta(seconds=-1)}):
        token = create_access_token("user-abc", "buyer")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_refresh_token_raises_refresh_error() -> None:
    with patch.dict(_LIFETIMES, {"refresh": timedelta(seconds=-1)}):
        token = create_refresh_token("user-abc", "buyer")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_token_signed_with_other_secret_rejected() -> None:
    forged = jwt.encode(
        {"sub": "user-abc", "role": "admin", "type": "access"}, "not-the-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidCredentialsError):
        decode_token(forged, expected_type="access")
