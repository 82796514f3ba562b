"""Product catalog endpoints. Reads are public, writes require a bearer token."""

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from src.storefront.api.http.deps import get_catalog_service, get_current_identity
from src.storefront.api.http.schemas import (
    CategoriesResponse,
    ImageUploadResponse,
    MessageResponse,
    Pagination,
    ProductEnvelope,
    ProductListResponse,
    ProductOut,
)
from src.storefront.core.errors import InvalidInput
from src.storefront.core.models import Identity, ProductCreate, ProductUpdate
from src.storefront.core.services import CatalogService, ImageUpload
from src.storefront.entities.core._base import MAX_INTEGER

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
def list_products(
    page: int = Query(1, le=MAX_INTEGER),
    limit: int = Query(10, le=MAX_INTEGER),
    category: str | None = Query(None),
    status_filter: str = Query("active", alias="status"),
    search: str | None = Query(None),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProductListResponse:
    """List products, newest first. ``status=`` (empty) lists every status."""
    result = catalog.list_products(
        page=page,
        limit=limit,
        category=category,
        status=status_filter,
        search=search,
    )
    return ProductListResponse(
        message="Products retrieved successfully",
        data=[ProductOut.from_entity(product) for product in result.products],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


# Registered before /{product_id} so "categories" is not parsed as an id.
@router.get("/categories", response_model=CategoriesResponse)
def list_categories(
    catalog: CatalogService = Depends(get_catalog_service),
) -> CategoriesResponse:
    return CategoriesResponse(
        message="Categories retrieved successfully", data=catalog.categories()
    )


@router.get("/{product_id}", response_model=ProductEnvelope)
def get_product(
    product_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProductEnvelope:
    product = catalog.get(product_id)
    return ProductEnvelope(
        message="Product retrieved successfully", data=ProductOut.from_entity(product)
    )


@router.post(
    "", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED
)
def create_product(
    body: ProductCreate,
    identity: Identity = Depends(get_current_identity),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProductEnvelope:
    product = catalog.create(body, user_id=identity.user_id)
    return ProductEnvelope(
        message="Product created successfully", data=ProductOut.from_entity(product)
    )


@router.put("/{product_id}", response_model=ProductEnvelope)
def update_product(
    product_id: str,
    body: ProductUpdate,
    identity: Identity = Depends(get_current_identity),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProductEnvelope:
    """Partial update: empty strings and nulls keep the stored value."""
    product = catalog.update(product_id, body, user_id=identity.user_id)
    return ProductEnvelope(
        message="Product updated successfully", data=ProductOut.from_entity(product)
    )


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    identity: Identity = Depends(get_current_identity),
    catalog: CatalogService = Depends(get_catalog_service),
) -> MessageResponse:
    catalog.delete(product_id, user_id=identity.user_id)
    return MessageResponse(message="Product deleted successfully")


@router.post("/{product_id}/image", response_model=ImageUploadResponse)
def upload_product_image(
    product_id: str,
    image: UploadFile | None = File(None),
    identity: Identity = Depends(get_current_identity),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ImageUploadResponse:
    """Attach an image (multipart field ``image``), replacing the previous one."""
    catalog.get(product_id)
    if image is None or not image.filename:
        raise InvalidInput("No image file provided")

    upload = ImageUpload(filename=image.filename, stream=image.file, size=image.size)
    stored = catalog.attach_image(product_id, upload, user_id=identity.user_id)
    return ImageUploadResponse(
        message="Image uploaded successfully", image_url=stored.url
    )
