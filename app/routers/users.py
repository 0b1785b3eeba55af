# app/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import TokenPayload, require_admin, require_auth
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.base import DeleteResult
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    UserCount,
    UserRead,
    UserUpdate,
    UserWrite,
    VerifyTokenRequest,
    VerifyTokenResponse,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


# -------- Public endpoints --------


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for an access token.

    Unknown email or wrong password -> 400, no token.
    """
    return service.login(session, payload)


@router.post("/register", response_model=UserRead)
def register(
    payload: UserWrite,
    session: Session = Depends(get_session),
):
    """
    Self-registration. The account is never an admin.
    """
    return service.create_user(session, payload, allow_admin=False)


# -------- Authenticated endpoints --------


@router.post("/verify-token", response_model=VerifyTokenResponse)
def verify_token(
    payload: VerifyTokenRequest | None = None,
    current: TokenPayload = Depends(require_auth),
):
    """
    Verify a token and return its identity claims.

    Checks `token` from the body when given, else the bearer token.
    """
    token = payload.token if payload and payload.token else current.token
    return service.verify_token(token)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_auth)],
)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_user(session, user_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def list_users(session: Session = Depends(get_session)):
    """
    List all users (admin only). Password hashes are never returned.
    """
    return service.list_users(session)


@router.get(
    "/get/count",
    response_model=UserCount,
    dependencies=[Depends(require_admin)],
)
def get_user_count(session: Session = Depends(get_session)):
    return UserCount(userCount=service.count_users(session))


@router.post(
    "",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def create_user(
    payload: UserWrite,
    session: Session = Depends(get_session),
):
    """
    Create an account (admin only); may grant admin.
    """
    return service.create_user(session, payload, allow_admin=True)


@router.put(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an account (admin only). Password changes only when sent.
    """
    return service.update_user(session, user_id, payload)


@router.delete(
    "/{user_id}",
    response_model=DeleteResult,
    dependencies=[Depends(require_admin)],
)
def delete_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.delete_user(session, user_id)
