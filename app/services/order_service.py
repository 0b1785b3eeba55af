# app/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.models.order import Order, OrderItem
from app.repositories.order_repo import OrderRepository
from app.schemas.base import DeleteResult
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
    UserSummary,
)
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Persist order items, then value them from their products'
        current prices, then persist the order (one transaction)
      - Hydrate orders for the admin dashboard
      - Admin status updates and deletes (items go with the order)
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    # -------- DTO builder --------

    @staticmethod
    def to_read(order: Order, with_items: bool = True) -> OrderRead:
        items: list[OrderItemRead] = []
        if with_items:
            for it in order.order_items:
                items.append(
                    OrderItemRead(
                        id=it.id,
                        quantity=it.quantity,
                        product=ProductService.to_read(it.product) if it.product else None,
                    )
                )

        user = order.user
        return OrderRead(
            id=order.id,
            order_items=items,
            shipping_address1=order.shipping_address1,
            shipping_address2=order.shipping_address2,
            city=order.city,
            zip=order.zip,
            country=order.country,
            phone=order.phone,
            status=order.status,
            total_price=order.total_price,
            user=UserSummary(id=user.id, name=user.name) if user else None,
            date_ordered=order.date_ordered,
        )

    def _get_or_404(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    # -------- Creation / valuation --------

    def create_order(self, session: Session, payload: OrderCreate) -> OrderRead:
        """
        Create an order from (product, quantity) pairs.

        Steps:
          1. Insert one OrderItem per requested line (flushed, not committed).
          2. Re-read the persisted items joined with their product's current
             price and sum price * quantity.
          3. Insert the Order with that total and attach the items.
          4. Commit once; any failure rolls back every step.

        Raises:
            HTTPException(400): a line references a product that does not exist.
        """
        try:
            items = self.order_repo.create_items(
                session,
                [
                    OrderItem(product_id=line.product, quantity=line.quantity)
                    for line in payload.order_items
                ],
            )

            rows = self.order_repo.line_prices(session, [it.id for it in items])
            if len(rows) != len(items) or any(price is None for _, _, price in rows):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Invalid product in order items",
                )
            total_price = sum(price * quantity for _, quantity, price in rows)

            order = self.order_repo.create_order(
                session,
                Order(
                    shipping_address1=payload.shipping_address1,
                    shipping_address2=payload.shipping_address2,
                    city=payload.city,
                    zip=payload.zip,
                    country=payload.country,
                    phone=payload.phone,
                    status=payload.status,
                    total_price=total_price,
                    user_id=payload.user,
                ),
            )

            for it in items:
                it.order_id = order.id
            session.add_all(items)
            session.commit()
        except IntegrityError:
            # FK-enforcing stores reject unknown products/users at flush time
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid product or user reference",
            )
        except HTTPException:
            session.rollback()
            raise

        session.refresh(order)
        logger.info("Created order %s (total %.2f)", order.id, order.total_price)
        return self.to_read(order)

    # -------- Reads --------

    def list_orders(self, session: Session) -> list[OrderRead]:
        """
        All orders, newest first, without items (admin list view).
        """
        return [self.to_read(o, with_items=False) for o in self.order_repo.list_all(session)]

    def get_order(self, session: Session, order_id: uuid.UUID) -> OrderRead:
        return self.to_read(self._get_or_404(session, order_id))

    def list_user_orders(self, session: Session, user_id: uuid.UUID) -> list[OrderRead]:
        return [self.to_read(o) for o in self.order_repo.list_for_user(session, user_id)]

    def total_sales(self, session: Session) -> float:
        return self.order_repo.total_sales(session)

    def count_orders(self, session: Session) -> int:
        return self.order_repo.count(session)

    # -------- Admin edits --------

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        order = self._get_or_404(session, order_id)
        order.status = payload.status
        order = self.order_repo.update_order(session, order)
        return self.to_read(order)

    def delete_order(self, session: Session, order_id: uuid.UUID) -> DeleteResult:
        """
        Delete an order and its line items in one commit.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="order not found!",
            )

        for item in self.order_repo.list_items_for_order(session, order.id):
            self.order_repo.delete_item(session, item)
        self.order_repo.delete_order(session, order)
        session.commit()

        return DeleteResult(success=True, message="the order is deleted!")
