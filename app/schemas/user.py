import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.base import CamelModel


class UserWrite(CamelModel):
    """
    Payload for admin create and self-registration.

    `is_admin` is honoured only on the admin create route; registration
    always produces a regular account.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: str = ""
    is_admin: bool = False
    street: str = ""
    apartment: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UserUpdate(CamelModel):
    """
    Admin update payload. Omitted fields are left unchanged; the password
    is re-hashed only when supplied.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    password: str | None = None
    phone: str | None = None
    is_admin: bool | None = None
    street: str | None = None
    apartment: str | None = None
    zip: str | None = None
    city: str | None = None
    country: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UserRead(CamelModel):
    """Response schema returned to clients (never carries the hash)."""

    id: uuid.UUID
    name: str
    email: str
    phone: str
    is_admin: bool
    street: str
    apartment: str
    zip: str
    city: str
    country: str
    created_at: datetime


class LoginRequest(SQLModel):
    email: str
    password: str


class LoginResponse(SQLModel):
    user: str
    token: str


class VerifyTokenRequest(SQLModel):
    token: str | None = None


class VerifyTokenResponse(SQLModel):
    success: bool
    userId: str
    isAdmin: bool


class UserCount(SQLModel):
    userCount: int
