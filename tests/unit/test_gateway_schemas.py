"""Unit tests for gateway request schemas."""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from config.settings import settings
from src.ct_gateway.user.schemas import (
    AdminUserUpdateRequest,
    LoginResponse,
    RegisterRequest,
    UserInfo,
)

_PROFILE = {
    "phone": "555-0100",
    "country": "US",
    "state": "IL",
    "city": "Springfield",
    "address1": "1 Main St",
}


def _register(**overrides: object) -> RegisterRequest:
    data = {"name": "Alice", "email": "alice@example.com", "password": "Pass1word", **_PROFILE}
    data.update(overrides)
    return RegisterRequest(**data)


class TestRegisterRequest:
    def test_defaults_to_buyer(self) -> None:
        req = _register()
        assert req.role == "buyer"
        assert req.address2 == ""

    def test_short_password(self) -> None:
        with pytest.raises(ValidationError):
            _register(password="short")

    def test_bad_email(self) -> None:
        with pytest.raises(ValidationError):
            _register(email="not-an-email")

    def test_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            _register(role="superuser")

    def test_seller_needs_contact_fields(self) -> None:
        with pytest.raises(ValidationError, match="address1"):
            _register(role="seller", address1="  ")

    def test_admin_skips_contact_fields(self) -> None:
        req = RegisterRequest(
            name="Root", email="root@example.com", password="Pass1word",
            role="admin", admin_passkey="secret",
        )
        assert req.phone is None


class TestAdminUserUpdateRequest:
    def test_only_set_fields_dumped(self) -> None:
        req = AdminUserUpdateRequest(role="seller", is_active=False)
        assert req.model_dump(exclude_unset=True) == {"role": "seller", "is_active": False}


class TestLoginResponse:
    def test_token_lifetime_follows_settings(self) -> None:
        user = SimpleNamespace(id="u-1", name="Alice", email="alice@example.com", role="seller")
        resp = LoginResponse(
            access_token="a",
            refresh_token="r",
            user=UserInfo.from_model(user),  # type: ignore[arg-type]
        )
        assert resp.expires_in == settings.JWT_EXPIRE_MINUTES * 60
        assert resp.token_type == "Bearer"
        assert resp.user.user_id == "u-1"
