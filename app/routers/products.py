# app/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.base import DeleteResult
from app.schemas.product import ProductCount, ProductFields, ProductRead
from app.services.product_service import ImageUpload, ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
category_repo = CategoryRepository()
service = ProductService(repo, category_repo)


# -------- Helpers --------


def request_base_url(request: Request) -> str:
    """
    "<scheme>://<host>" as seen by the client, used to build image URLs.
    """
    host = request.headers.get("host") or request.url.netloc
    return f"{request.url.scheme}://{host}"


def _parse_category(raw: str | None) -> uuid.UUID | None:
    if not raw:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Category",
        )


def _read_upload(file: UploadFile | None) -> ImageUpload | None:
    if file is None or not file.filename:
        return None
    return ImageUpload(
        filename=file.filename,
        content_type=file.content_type,
        data=file.file.read(),
    )


def product_form(
    name: str | None = Form(default=None),
    description: str | None = Form(default=None),
    rich_description: str | None = Form(default=None, alias="richDescription"),
    brand: str | None = Form(default=None),
    price: float | None = Form(default=None, ge=0),
    count_in_stock: int | None = Form(default=None, ge=0, alias="countInStock"),
    rating: float | None = Form(default=None),
    num_reviews: int | None = Form(default=None, alias="numReviews"),
    is_featured: bool | None = Form(default=None, alias="isFeatured"),
) -> ProductFields:
    """
    Collect the product's multipart form fields (camelCase on the wire).
    """
    return ProductFields(
        name=name,
        description=description,
        rich_description=rich_description,
        brand=brand,
        price=price,
        count_in_stock=count_in_stock,
        rating=rating,
        num_reviews=num_reviews,
        is_featured=is_featured,
    )


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    categories: str | None = None,
    session: Session = Depends(get_session),
):
    """
    List products with their category.

    - Public endpoint.
    - `?categories=<id>,<id>` limits results to those categories.
    """
    return service.list_products(session, categories=categories)


@router.get("/get/count", response_model=ProductCount)
def count_products(session: Session = Depends(get_session)):
    """Number of products (public)."""
    return ProductCount(productCount=service.count_products(session))


@router.get("/get/featured/{count}", response_model=list[ProductRead])
def list_featured_products(
    count: int,
    session: Session = Depends(get_session),
):
    """
    Up to `count` featured products (0 = no limit).
    """
    return service.list_featured(session, count)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def create_product(
    request: Request,
    fields: ProductFields = Depends(product_form),
    category: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only, multipart).

    - `category` must reference an existing category.
    - `image` is required; PNG or JPEG, stored as lossless WebP.
    """
    if not fields.name or not fields.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product name is required",
        )

    return service.create_product(
        session=session,
        fields=fields,
        category_id=_parse_category(category),
        upload=_read_upload(image),
        base_url=request_base_url(request),
    )


@router.put(
    "/gallery-images/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
    summary="Replace the gallery images of a product",
)
def replace_gallery_images(
    request: Request,
    product_id: uuid.UUID,
    images: list[UploadFile] | None = File(default=None),
    session: Session = Depends(get_session),
):
    """
    Replace the product's gallery with the uploaded files (max 5).

    - Accepts PNG, JPEG.
    - Previous gallery files are removed; the new list keeps upload order.
    """
    uploads = [u for u in (_read_upload(f) for f in images or []) if u is not None]
    return service.replace_gallery(
        session=session,
        product_id=product_id,
        uploads=uploads,
        base_url=request_base_url(request),
    )


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    request: Request,
    product_id: uuid.UUID,
    fields: ProductFields = Depends(product_form),
    category: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only, multipart).

    - `category` must reference an existing category.
    - Without `image` the current image is kept.
    """
    return service.update_product(
        session=session,
        product_id=product_id,
        fields=fields,
        category_id=_parse_category(category),
        upload=_read_upload(image),
        base_url=request_base_url(request),
    )


@router.delete(
    "/{product_id}",
    response_model=DeleteResult,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product (admin only). Its image files are removed best-effort.
    """
    return service.delete_product(session, product_id)
