from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt

from app.core.config import Settings, get_settings
from app.models.user import User


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt (salt included in the result).

    Example:
        >>> hash_password("secret").startswith("$2b$")
        True
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Malformed hash in the store
        return False


def create_access_token(user: User, settings: Settings | None = None) -> str:
    """
    Issue a short-lived HS256 token for `user`.

    Claims:
      - sub / userId: user id (string)
      - isAdmin: role flag checked by `require_admin`
      - iat, exp
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "userId": str(user.id),
        "isAdmin": bool(user.is_admin),
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALG)


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        jose.JWTError: on bad signature, malformed token or expiry.
    """
    settings = settings or get_settings()
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])
