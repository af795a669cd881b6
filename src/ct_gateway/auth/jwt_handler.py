"""JWT issue and verification (python-jose, HS256 by default).

Both token types carry ``sub`` (user id) and ``role``; ``type`` tells them
apart and is checked strictly on decode so a refresh token can never be used
as a bearer token. Handlers still load the user row and trust the database
role over the claim.

No revocation list: a token stays valid until ``exp``.
"""

from datetime import UTC, datetime, timedelta
from typing import Literal, NoReturn

from jose import JWTError, jwt

from config.settings import settings
from src.ct_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

TokenType = Literal["access", "refresh"]

_LIFETIMES: dict[str, timedelta] = {
    "access": timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    "refresh": timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS),
}


def _issue(user_id: str, role: str, token_type: TokenType) -> str:
    issued_at = datetime.now(UTC)
    claims = {
        "sub": user_id,
        "role": role,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + _LIFETIMES[token_type],
    }
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM))


def create_access_token(user_id: str, role: str) -> str:
    return _issue(user_id, role, "access")


def create_refresh_token(user_id: str, role: str) -> str:
    return _issue(user_id, role, "refresh")


def decode_token(token: str, expected_type: TokenType) -> dict[str, str]:
    """Return the claims of a valid, unexpired token of ``expected_type``.

    Raises InvalidCredentialsError for access tokens and
    InvalidRefreshTokenError for refresh tokens; the caller never sees why.
    """
    try:
        claims: dict[str, str] = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        _reject(expected_type)
    if claims.get("type") != expected_type:
        _reject(expected_type)
    return claims


def _reject(expected_type: TokenType) -> NoReturn:
    if expected_type == "refresh":
        raise InvalidRefreshTokenError()
    raise InvalidCredentialsError()
