import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Shop account (customers and dashboard admins).

    Password:
      - only the bcrypt hash is stored (`password_hash`), never the
        plain text; read schemas never expose it.

    Role:
      - `is_admin` is embedded in issued tokens as the `isAdmin` claim.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100)

    email: str = Field(
        unique=True,
        index=True,
        description="Login identifier",
    )

    password_hash: str = Field(description="bcrypt hash (salt included)")

    phone: str = Field(default="")

    is_admin: bool = Field(
        default=False,
        index=True,
        description="Grants access to admin-only routes",
    )

    street: str = Field(default="")
    apartment: str = Field(default="")
    zip: str = Field(default="")
    city: str = Field(default="")
    country: str = Field(default="")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
