"""Pydantic request/response schemas for ct_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, model_validator

from config.settings import settings
from src.ct_common.datetime_utils import isoformat_or_none
from src.ct_gateway.user.db_models import UserModel

RoleLiteral = Literal["admin", "seller", "buyer"]

# Contact fields every non-admin user must provide
_REQUIRED_PROFILE_FIELDS = ("phone", "country", "state", "city", "address1")


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: RoleLiteral = "buyer"
    phone: str | None = Field(None, max_length=32)
    country: str | None = Field(None, max_length=64)
    state: str | None = Field(None, max_length=64)
    city: str | None = Field(None, max_length=64)
    address1: str | None = Field(None, max_length=255)
    address2: str = Field("", max_length=255)
    company_name: str = Field("", max_length=255)
    admin_passkey: str | None = None

    @model_validator(mode="after")
    def profile_required_for_non_admin(self) -> "RegisterRequest":
        if self.role != "admin":
            missing = [f for f in _REQUIRED_PROFILE_FIELDS if not (getattr(self, f) or "").strip()]
            if missing:
                raise ValueError(f"Missing required fields: {', '.join(missing)}")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class ProfileUpdateRequest(BaseModel):
    """Fields a user may change on their own profile (role and email excluded)."""

    name: str | None = Field(None, min_length=1, max_length=128)
    phone: str | None = Field(None, max_length=32)
    country: str | None = Field(None, max_length=64)
    state: str | None = Field(None, max_length=64)
    city: str | None = Field(None, max_length=64)
    address1: str | None = Field(None, max_length=255)
    address2: str | None = Field(None, max_length=255)
    company_name: str | None = Field(None, max_length=255)


class AdminUserUpdateRequest(ProfileUpdateRequest):
    """Admin edits may also change email, role, and the active flag."""

    email: EmailStr | None = None
    role: RoleLiteral | None = None
    is_active: bool | None = None


class UserInfo(BaseModel):
    """Minimal user info embedded in responses."""

    user_id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_model(cls, user: UserModel) -> "UserInfo":
        return cls(user_id=str(user.id), name=user.name, email=user.email, role=user.role)


class UserProfile(BaseModel):
    user_id: str
    name: str
    email: str
    role: str
    phone: str | None
    country: str | None
    state: str | None
    city: str | None
    address1: str | None
    address2: str
    company_name: str
    is_active: bool
    created_at: str | None

    @classmethod
    def from_model(cls, user: UserModel) -> "UserProfile":
        return cls(
            user_id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            phone=user.phone,
            country=user.country,
            state=user.state,
            city=user.city,
            address1=user.address1,
            address2=user.address2 or "",
            company_name=user.company_name or "",
            is_active=user.is_active,
            created_at=isoformat_or_none(user.created_at),
        )


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = Field(default_factory=lambda: settings.JWT_EXPIRE_MINUTES * 60)


class LoginResponse(RefreshResponse):
    refresh_token: str
    token_type: str = "Bearer"
    user: UserInfo
