import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.base import CamelModel
from app.schemas.product import ProductRead

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "canceled"]


class OrderItemCreate(CamelModel):
    """
    One requested line: which product and how many.
    """

    product: uuid.UUID
    quantity: int = Field(ge=1)


class OrderCreate(CamelModel):
    """
    Payload for placing an order.

    Backend derives:
      - total_price from the persisted items' product prices
      - status = 'pending' unless given
    """

    model_config = ConfigDict(extra="forbid")

    order_items: list[OrderItemCreate] = Field(min_length=1)
    shipping_address1: str
    shipping_address2: str = ""
    city: str
    zip: str
    country: str
    phone: str
    status: OrderStatus = "pending"
    user: uuid.UUID | None = None

    @field_validator("shipping_address1", "city", "zip", "country", "phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OrderStatusUpdate(CamelModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class UserSummary(CamelModel):
    id: uuid.UUID
    name: str


class OrderItemRead(CamelModel):
    """
    Line item with its product (and the product's category) hydrated.
    """

    id: uuid.UUID
    quantity: int
    product: ProductRead | None


class OrderRead(CamelModel):
    """
    Order representation. `order_items` is empty on list views.
    """

    id: uuid.UUID
    order_items: list[OrderItemRead]
    shipping_address1: str
    shipping_address2: str
    city: str
    zip: str
    country: str
    phone: str
    status: OrderStatus
    total_price: float
    user: UserSummary | None
    date_ordered: datetime


class TotalSales(SQLModel):
    totalsales: float


class OrderCount(SQLModel):
    orderCount: int
