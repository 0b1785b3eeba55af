# app/services/product_service.py
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.exceptions import ImageProcessingException
from app.core.storage_utils import (
    UPLOAD_DIR,
    build_public_url,
    discard_image,
    extract_filename_from_url,
    save_image,
    validate_gallery_count,
    validate_image,
)
from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.base import DeleteResult
from app.schemas.product import ProductFields, ProductRead
from app.services.category_service import CategoryService

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """One uploaded file, already read from the multipart body."""

    filename: str | None
    content_type: str | None
    data: bytes


class ProductService:
    """
    Business logic for Product and its images.

    Responsibilities:
      - category reference checks
      - primary image replace: write new file, then retire the old one
      - gallery replace: retire old files, write new ones in upload order
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(
        self,
        repo: ProductRepository,
        category_repo: CategoryRepository,
        upload_dir: Path = UPLOAD_DIR,
    ):
        self.repo = repo
        self.category_repo = category_repo
        self.upload_dir = upload_dir

    # ----- Helpers -----

    @staticmethod
    def to_read(product: Product) -> ProductRead:
        category = product.category
        return ProductRead(
            id=product.id,
            name=product.name,
            description=product.description,
            rich_description=product.rich_description,
            image=product.image,
            images=list(product.images or []),
            brand=product.brand,
            price=product.price,
            category=CategoryService.to_read(category) if category else None,
            count_in_stock=product.count_in_stock,
            rating=product.rating,
            num_reviews=product.num_reviews,
            is_featured=product.is_featured,
            date_created=product.date_created,
        )

    def _get_product_or_404(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _ensure_category(self, session: Session, category_id: uuid.UUID | None) -> uuid.UUID:
        if category_id is None or not self.category_repo.get_by_id(session, category_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid Category",
            )
        return category_id

    def _store(self, upload: ImageUpload, base_url: str) -> str:
        """Transcode + write one upload and return its public URL."""
        filename = save_image(
            upload.filename,
            upload.content_type,
            upload.data,
            upload_dir=self.upload_dir,
        )
        return build_public_url(base_url, filename)

    def _retire(self, url: str | None) -> None:
        """Best-effort removal of a file no longer referenced."""
        filename = extract_filename_from_url(url)
        if filename:
            discard_image(filename, upload_dir=self.upload_dir)

    @staticmethod
    def _apply_fields(product: Product, fields: ProductFields) -> None:
        for key, value in fields.model_dump(exclude_none=True).items():
            setattr(product, key, value)

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        categories: str | None = None,
    ) -> list[ProductRead]:
        """
        List products, optionally filtered by a comma-separated list of
        category ids (`?categories=<id>,<id>`).
        """
        category_ids: list[uuid.UUID] | None = None
        if categories:
            try:
                category_ids = [
                    uuid.UUID(raw.strip()) for raw in categories.split(",") if raw.strip()
                ]
            except ValueError:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Invalid category id in filter",
                )
        products = self.repo.list_products(session, category_ids=category_ids)
        return [self.to_read(p) for p in products]

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        return self.to_read(self._get_product_or_404(session, product_id))

    def count_products(self, session: Session) -> int:
        return self.repo.count(session)

    def list_featured(self, session: Session, count: int) -> list[ProductRead]:
        return [self.to_read(p) for p in self.repo.list_featured(session, count)]

    def create_product(
        self,
        session: Session,
        fields: ProductFields,
        category_id: uuid.UUID | None,
        upload: ImageUpload | None,
        base_url: str,
    ) -> ProductRead:
        """
        Create a product; the primary image is mandatory.

        Order: category check -> image check -> write file -> insert row.
        """
        category_id = self._ensure_category(session, category_id)

        if upload is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No image in the request",
            )

        image_url = self._store(upload, base_url)

        product = Product(category_id=category_id, image=image_url, images=[])
        self._apply_fields(product, fields)
        product = self.repo.create(session, product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return self.to_read(product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        fields: ProductFields,
        category_id: uuid.UUID | None,
        upload: ImageUpload | None,
        base_url: str,
    ) -> ProductRead:
        """
        Partial update of a product.

        - The category reference must resolve.
        - Without a new image the current address is kept.
        - With a new image, the new file is written first and the old file
          is retired afterwards (failure there is only logged).
        """
        product = self._get_product_or_404(session, product_id)
        product.category_id = self._ensure_category(session, category_id)

        old_image = None
        if upload is not None:
            old_image = product.image
            product.image = self._store(upload, base_url)

        self._apply_fields(product, fields)
        product = self.repo.update(session, product)

        if old_image and old_image != product.image:
            self._retire(old_image)

        return self.to_read(product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> DeleteResult:
        """
        Delete the product row, then retire its files (best-effort).
        """
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="product not found!",
            )

        urls = [product.image, *(product.images or [])]
        self.repo.delete(session, product)

        for url in urls:
            self._retire(url)

        return DeleteResult(success=True, message="the product is deleted!")

    # ----- Gallery images -----

    def replace_gallery(
        self,
        session: Session,
        product_id: uuid.UUID,
        uploads: Sequence[ImageUpload],
        base_url: str,
    ) -> ProductRead:
        """
        Replace the whole gallery with `uploads` (in upload order).

        Steps:
          1. Product must exist; count and every content type are checked
             before anything is touched.
          2. Old gallery files are retired.
          3. New files are transcoded and written one by one.
          4. The product's `images` becomes exactly the new URL list.

        If a write fails midway, the files this request already wrote are
        retired and the record is left as it was.
        """
        product = self._get_product_or_404(session, product_id)

        validate_gallery_count(len(uploads))
        for upload in uploads:
            validate_image(upload.content_type, upload.data)

        for url in product.images or []:
            self._retire(url)

        new_urls: list[str] = []
        try:
            for upload in uploads:
                new_urls.append(self._store(upload, base_url))
        except ImageProcessingException:
            for url in new_urls:
                self._retire(url)
            raise

        product.images = new_urls
        product = self.repo.update(session, product)
        return self.to_read(product)
