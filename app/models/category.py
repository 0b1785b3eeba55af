import uuid

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Product category shown in the admin dashboard and storefront filters.

      - id, name, icon, color
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the category",
    )

    icon: str | None = Field(
        default=None,
        description="Icon identifier used by the dashboard",
    )

    color: str | None = Field(
        default=None,
        description="Display color, e.g. '#ffcc00'",
    )
