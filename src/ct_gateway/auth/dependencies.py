"""Authentication and role dependencies for protected routes.

    @router.get("/orders/{order_id}")
    async def get_order(user: Annotated[UserModel, Depends(get_current_user)]): ...

Role checks run against the user row loaded here, never against the token's
``role`` claim, so a demotion takes effect before the token expires.
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.enums import UserRole
from src.ct_common.errors import AccountDisabledError, ForbiddenError, InvalidCredentialsError
from src.ct_gateway.auth.jwt_handler import decode_token
from src.ct_gateway.user.db_models import UserModel

bearer_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: str = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """401 for a bad token or a deleted user; AccountDisabledError for inactive users."""
    try:
        claims = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _unauthorized() from None

    user_id = claims.get("sub")
    user = None
    if user_id:
        user = (
            await db.execute(select(UserModel).where(UserModel.id == user_id))
        ).scalar_one_or_none()
    if user is None:
        raise _unauthorized()
    if not user.is_active:
        raise AccountDisabledError()
    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[UserModel]]:
    """Dependency factory admitting only the given roles (ForbiddenError otherwise)."""
    allowed = frozenset(r.value for r in roles)
    label = ", ".join(sorted(allowed))

    async def _check(current_user: UserModel = Depends(get_current_user)) -> UserModel:
        if current_user.role not in allowed:
            raise ForbiddenError(f"Requires role: {label}")
        return current_user

    return _check


require_admin = require_roles(UserRole.ADMIN)
