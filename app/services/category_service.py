# app/services/category_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.category import Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.base import DeleteResult
from app.schemas.category import CategoryRead, CategoryWrite


class CategoryService:
    """
    Business logic for Category.

    Deleting a category leaves its products in place with no category.
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    @staticmethod
    def to_read(category: Category) -> CategoryRead:
        return CategoryRead(
            id=category.id,
            name=category.name,
            icon=category.icon,
            color=category.color,
        )

    def _get_or_404(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="The category with the given ID was not found.",
            )
        return category

    def list_categories(self, session: Session) -> list[CategoryRead]:
        return [self.to_read(c) for c in self.repo.list_categories(session)]

    def get_category(self, session: Session, category_id: uuid.UUID) -> CategoryRead:
        return self.to_read(self._get_or_404(session, category_id))

    def create_category(self, session: Session, payload: CategoryWrite) -> CategoryRead:
        category = Category(name=payload.name, icon=payload.icon, color=payload.color)
        return self.to_read(self.repo.create(session, category))

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryWrite,
    ) -> CategoryRead:
        """
        Replace name/icon/color of an existing category (never creates).
        """
        category = self._get_or_404(session, category_id)
        category.name = payload.name
        category.icon = payload.icon
        category.color = payload.color
        return self.to_read(self.repo.update(session, category))

    def delete_category(self, session: Session, category_id: uuid.UUID) -> DeleteResult:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="category not found!",
            )

        self.repo.delete(session, category)
        return DeleteResult(success=True, message="the category is deleted!")
