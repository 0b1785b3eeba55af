from dataclasses import dataclass
from typing import Any

from fastapi import Header, HTTPException, status
from jose import JWTError

from app.core.security import decode_access_token


@dataclass
class TokenPayload:
    """Identity carried by a verified token."""

    user_id: str
    is_admin: bool
    token: str
    claims: dict[str, Any]


def _split_bearer(authorization: str) -> str | None:
    """
    "Bearer <token>" -> "<token>"; anything else -> None.
    """
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def _payload_from_claims(token: str, claims: dict[str, Any]) -> TokenPayload:
    return TokenPayload(
        user_id=str(claims.get("userId") or claims.get("sub") or ""),
        is_admin=claims.get("isAdmin") is True,
        token=token,
        claims=claims,
    )


def require_auth(authorization: str | None = Header(default=None)) -> TokenPayload:
    """
    General gate for every non-public route.

    Stateless: the token is verified (signature + exp) and its claims are
    returned; the store is not consulted.

    Raises:
        HTTPException(401): header missing, not "Bearer <token>", or the
        token fails verification.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = _split_bearer(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _payload_from_claims(token, claims)


def require_admin(authorization: str | None = Header(default=None)) -> TokenPayload:
    """
    Stricter check for admin-only routes.

    Parses the header on its own (it does not build on `require_auth`),
    and each failure has its own outcome:

      - no header                 -> 401 "Access denied: no token provided"
      - not "Bearer <token>"      -> 401 "Access denied: invalid token format"
      - signature / expiry fails  -> 400 "Invalid token"
      - isAdmin claim not true    -> 403 "Access denied: not an admin"
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied: no token provided",
        )

    token = _split_bearer(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied: invalid token format",
        )

    try:
        claims = decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid token",
        )

    payload = _payload_from_claims(token, claims)
    if not payload.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: not an admin",
        )
    return payload
