# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin, require_auth
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.schemas.base import DeleteResult
from app.schemas.order import (
    OrderCount,
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
    TotalSales,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
service = OrderService(order_repo)


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=OrderRead,
    dependencies=[Depends(require_auth)],
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
):
    """
    Place an order.

    The total is computed server-side from the products' current prices;
    any client-sent total is ignored.
    """
    return service.create_order(session, payload)


@router.get(
    "/get/userorders/{user_id}",
    response_model=list[OrderRead],
    dependencies=[Depends(require_auth)],
)
def list_user_orders(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Orders of one user, newest first, with items hydrated.
    """
    return service.list_user_orders(session, user_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_orders(session: Session = Depends(get_session)):
    """
    List all orders, newest first (admin only).
    """
    return service.list_orders(session)


@router.get(
    "/get/totalsales",
    response_model=TotalSales,
    dependencies=[Depends(require_admin)],
)
def get_total_sales(session: Session = Depends(get_session)):
    """Sum of all orders' total price (0 when there are none)."""
    return TotalSales(totalsales=service.total_sales(session))


@router.get(
    "/get/count",
    response_model=OrderCount,
    dependencies=[Depends(require_admin)],
)
def get_order_count(session: Session = Depends(get_session)):
    return OrderCount(orderCount=service.count_orders(session))


@router.get(
    "/{order_id}",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with items, products and categories (admin only).
    """
    return service.get_order(session, order_id)


@router.put(
    "/{order_id}",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).
    """
    return service.update_status(session, order_id, payload)


@router.delete(
    "/{order_id}",
    response_model=DeleteResult,
    dependencies=[Depends(require_admin)],
)
def delete_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete an order and its line items (admin only).
    """
    return service.delete_order(session, order_id)
