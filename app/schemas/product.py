import uuid
from datetime import datetime

from sqlmodel import SQLModel

from app.schemas.base import CamelModel
from app.schemas.category import CategoryRead


class ProductFields(CamelModel):
    """
    Text/numeric fields of a product as sent by the dashboard form.

    Products are submitted as multipart forms (they carry an image), so
    the router builds this from `Form(...)` values. All fields are
    optional here; create-time requirements are enforced in the router.
    """

    name: str | None = None
    description: str | None = None
    rich_description: str | None = None
    brand: str | None = None
    price: float | None = None
    count_in_stock: int | None = None
    rating: float | None = None
    num_reviews: int | None = None
    is_featured: bool | None = None


class ProductRead(CamelModel):
    """
    Product representation for clients, with its category hydrated.
    """

    id: uuid.UUID
    name: str
    description: str
    rich_description: str
    image: str
    images: list[str]
    brand: str
    price: float
    category: CategoryRead | None
    count_in_stock: int
    rating: float
    num_reviews: int
    is_featured: bool
    date_created: datetime


class ProductCount(SQLModel):
    productCount: int
