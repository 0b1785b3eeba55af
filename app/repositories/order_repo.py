import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order, OrderItem
from app.models.product import Product


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here except for single-row admin edits; order creation
        and deletion are multi-step and the service calls session.commit().
    """

    # ---- Orders ----

    def list_all(self, session: Session) -> list[Order]:
        stmt = select(Order).order_by(Order.date_ordered.desc())
        return session.exec(stmt).all()

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.date_ordered.desc())
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        return int(session.exec(stmt).one() or 0)

    def total_sales(self, session: Session) -> float:
        stmt = select(func.coalesce(func.sum(Order.total_price), 0.0))
        return float(session.exec(stmt).one() or 0.0)

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def delete_order(self, session: Session, order: Order) -> None:
        session.delete(order)
        session.flush()

    # ---- Order items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        return session.exec(stmt).all()

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        for item in items:
            session.refresh(item)
        return items

    def line_prices(
        self,
        session: Session,
        item_ids: list[uuid.UUID],
    ) -> list[tuple[uuid.UUID, int, float | None]]:
        """
        Re-read persisted items with their product's current price.

        Returns (item_id, quantity, price) per item; price is None when the
        referenced product does not exist.
        """
        stmt = (
            select(OrderItem.id, OrderItem.quantity, Product.price)
            .outerjoin(Product, Product.id == OrderItem.product_id)
            .where(OrderItem.id.in_(item_ids))
        )
        return list(session.exec(stmt).all())

    def delete_item(self, session: Session, item: OrderItem) -> None:
        session.delete(item)
        session.flush()
