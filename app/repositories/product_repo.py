import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        category_ids: list[uuid.UUID] | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if category_ids:
            stmt = stmt.where(Product.category_id.in_(category_ids))
        return session.exec(stmt).all()

    def list_featured(self, session: Session, limit: int) -> list[Product]:
        stmt = select(Product).where(Product.is_featured == True)  # noqa: E712
        if limit > 0:
            stmt = stmt.limit(limit)
        return session.exec(stmt).all()

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product)
        return int(session.exec(stmt).one() or 0)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
