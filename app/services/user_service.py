# app/services/user_service.py
import uuid

from fastapi import HTTPException, status
from jose import JWTError
from sqlmodel import Session

from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.base import DeleteResult
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    UserRead,
    UserUpdate,
    UserWrite,
    VerifyTokenResponse,
)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - hash passwords before they reach the store
      - keep emails unique
      - issue and verify access tokens
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def to_read(user: User) -> UserRead:
        return UserRead(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            is_admin=user.is_admin,
            street=user.street,
            apartment=user.apartment,
            zip=user.zip,
            city=user.city,
            country=user.country,
            created_at=user.created_at,
        )

    def _get_or_404(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="The user with the given ID was not found.",
            )
        return user

    def _ensure_email_free(
        self,
        session: Session,
        email: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        existing = self.repo.get_by_email(session, email)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"User with email '{email}' already exists",
            )

    # ----- Accounts -----

    def create_user(
        self,
        session: Session,
        payload: UserWrite,
        allow_admin: bool = False,
    ) -> UserRead:
        """
        Create an account. `allow_admin` is only True on the admin route;
        self-registration always yields is_admin=False.
        """
        email = str(payload.email).lower()
        self._ensure_email_free(session, email)

        user = User(
            name=payload.name,
            email=email,
            password_hash=hash_password(payload.password),
            phone=payload.phone,
            is_admin=payload.is_admin if allow_admin else False,
            street=payload.street,
            apartment=payload.apartment,
            zip=payload.zip,
            city=payload.city,
            country=payload.country,
        )
        return self.to_read(self.repo.create(session, user))

    def update_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserUpdate,
    ) -> UserRead:
        """
        Admin update. The password is re-hashed only when supplied;
        otherwise the stored hash is kept.
        """
        user = self._get_or_404(session, user_id)
        data = payload.model_dump(exclude_none=True)

        if "email" in data:
            data["email"] = str(data["email"]).lower()
            self._ensure_email_free(session, data["email"], exclude_id=user.id)

        password = data.pop("password", None)
        if password:
            user.password_hash = hash_password(password)

        for key, value in data.items():
            setattr(user, key, value)

        return self.to_read(self.repo.update(session, user))

    def list_users(self, session: Session) -> list[UserRead]:
        return [self.to_read(u) for u in self.repo.list_users(session)]

    def get_user(self, session: Session, user_id: uuid.UUID) -> UserRead:
        return self.to_read(self._get_or_404(session, user_id))

    def count_users(self, session: Session) -> int:
        return self.repo.count(session)

    def delete_user(self, session: Session, user_id: uuid.UUID) -> DeleteResult:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="user not found!",
            )
        self.repo.delete(session, user)
        return DeleteResult(success=True, message="the user is deleted!")

    # ----- Tokens -----

    def login(self, session: Session, payload: LoginRequest) -> LoginResponse:
        """
        Check credentials and issue a token. Nothing is written to the store.

        Raises:
            HTTPException(400): unknown email or wrong password.
        """
        user = self.repo.get_by_email(session, payload.email.strip().lower())
        if not user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The user not found",
            )

        if not verify_password(payload.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The password is wrong",
            )

        return LoginResponse(user=user.email, token=create_access_token(user))

    @staticmethod
    def verify_token(token: str | None) -> VerifyTokenResponse:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Token must be provided",
            )
        try:
            claims = decode_access_token(token)
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid token",
            )
        return VerifyTokenResponse(
            success=True,
            userId=str(claims.get("userId") or claims.get("sub") or ""),
            isAdmin=claims.get("isAdmin") is True,
        )
