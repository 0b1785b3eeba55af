import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field, Relationship

from app.models.product import Product
from app.models.user import User


class Order(SQLModel, table=True):
    """
    Customer order.

      - id, shipping_address1, shipping_address2, city, zip, country,
        phone, status, total_price, user_id, date_ordered
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    shipping_address1: str = Field(description="Street address line 1")
    shipping_address2: str = Field(default="")
    city: str
    zip: str
    country: str
    phone: str

    # pending | processing | shipped | delivered | canceled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status",
    )

    # Sum of product price * quantity, fixed at creation
    total_price: float = Field(default=0)

    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        ondelete="SET NULL",
        index=True,
    )

    date_ordered: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    user: User | None = Relationship()
    order_items: list["OrderItem"] = Relationship(back_populates="order")


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    Items are inserted before their order exists, so `order_id` starts
    empty and is set once the order row is created.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
    )

    # Left empty when the product is deleted; the line keeps its quantity
    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        ondelete="SET NULL",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    order: Order | None = Relationship(back_populates="order_items")
    product: Product | None = Relationship()
