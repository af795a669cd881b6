"""User domain service: register, login, refresh, profile reads and edits.

All DB operations use the injected AsyncSession. Register runs inside the
caller's `async with db.begin()`; profile updates commit themselves.
"""

import hmac
import uuid
from typing import Any

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ct_common.enums import UserRole
from src.ct_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidAdminPasskeyError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from src.ct_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ct_gateway.auth.password import hash_password, verify_password
from src.ct_gateway.user.db_models import UserModel
from src.ct_gateway.user.schemas import RegisterRequest

_CREATE_ACCOUNT_SQL = text(
    "INSERT INTO accounts (user_id, balance, pending_balance, version) "
    "VALUES (:user_id, 0, 0, 0)"
)


def _passkey_matches(given: str | None) -> bool:
    expected = settings.ADMIN_PASSKEY
    if not expected or given is None:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def _parse_id(user_id: str) -> uuid.UUID:
    """Path ids that are not UUIDs name no user."""
    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise UserNotFoundError(user_id) from None


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(self, req: RegisterRequest, db: AsyncSession) -> UserModel:
        """Register a new user and auto-create their account row.

        Atomically inserts into `users` and `accounts` in a single transaction.
        The caller must wrap this in `async with db.begin()`.
        """
        if req.role == UserRole.ADMIN.value and not _passkey_matches(req.admin_passkey):
            raise InvalidAdminPasskeyError()

        # DB UNIQUE constraint is the final guard
        result = await db.execute(select(UserModel).where(UserModel.email == req.email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            name=req.name,
            email=req.email,
            password_hash=hash_password(req.password),
            role=req.role,
            phone=req.phone,
            country=req.country,
            state=req.state,
            city=req.city,
            address1=req.address1,
            address2=req.address2,
            company_name=req.company_name,
            is_active=True,
        )
        db.add(user)
        await db.flush()  # Get user.id without committing

        await db.execute(_CREATE_ACCOUNT_SQL, {"user_id": str(user.id)})
        return user

    async def login(
        self, email: str, password: str, db: AsyncSession
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError.
        """
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id), user.role),
            create_refresh_token(str(user.id), user.role),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]), str(payload.get("role", "buyer")))

    async def get_user(self, user_id: str, db: AsyncSession) -> UserModel:
        result = await db.execute(select(UserModel).where(UserModel.id == _parse_id(user_id)))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def list_users(self, role: str | None, db: AsyncSession) -> list[UserModel]:
        stmt = select(UserModel).order_by(UserModel.created_at.desc())
        if role:
            stmt = stmt.where(UserModel.role == role)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def update_user(
        self, user_id: str, changes: dict[str, Any], db: AsyncSession
    ) -> UserModel:
        """Apply non-None *changes* to a user row and commit."""
        user = await self.get_user(user_id, db)
        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            result = await db.execute(select(UserModel).where(UserModel.email == new_email))
            if result.scalar_one_or_none() is not None:
                raise EmailExistsError()
        for field, value in changes.items():
            if value is not None:
                setattr(user, field, value)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return user

    async def delete_user(self, user_id: str, db: AsyncSession) -> None:
        user = await self.get_user(user_id, db)
        try:
            await db.execute(delete(UserModel).where(UserModel.id == user.id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
