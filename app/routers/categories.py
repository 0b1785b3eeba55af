# app/routers/categories.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.schemas.base import DeleteResult
from app.schemas.category import CategoryRead, CategoryWrite
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

repo = CategoryRepository()
service = CategoryService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """List all categories (public)."""
    return service.list_categories(session)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """Get a single category by id (public)."""
    return service.get_category(session, category_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryWrite,
    session: Session = Depends(get_session),
):
    return service.create_category(session, payload)


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryWrite,
    session: Session = Depends(get_session),
):
    return service.update_category(session, category_id, payload)


@router.delete(
    "/{category_id}",
    response_model=DeleteResult,
    dependencies=[Depends(require_admin)],
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a category (admin only).

    Products that used it are kept with no category.
    """
    return service.delete_category(session, category_id)
