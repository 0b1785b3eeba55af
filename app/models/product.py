import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field, Relationship

from app.models.category import Category


class Product(SQLModel, table=True):
    """
    Product catalog entry.

      - id, name, description, rich_description, brand, price,
        count_in_stock, rating, num_reviews, image, images,
        category_id, is_featured, date_created

    `image` is the primary image URL; `images` is the ordered gallery
    (at most 5 URLs). Both point at files under the public uploads path.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        default="",
        description="Short plain-text description",
    )

    rich_description: str = Field(
        default="",
        description="Long description / HTML",
    )

    image: str = Field(
        default="",
        description="Primary image URL",
    )

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Gallery image URLs in upload order",
    )

    brand: str = Field(default="")

    price: float = Field(
        default=0,
        ge=0,
        description="Unit price",
    )

    # Left empty when the category is deleted
    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        ondelete="SET NULL",
        index=True,
    )

    count_in_stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    rating: float = Field(default=0)

    num_reviews: int = Field(default=0)

    is_featured: bool = Field(
        default=False,
        index=True,
        description="Whether this product is shown in featured listings",
    )

    date_created: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    category: Category | None = Relationship()
