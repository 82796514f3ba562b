import math
import uuid
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.storefront.core.errors import InternalError, InvalidInput, NotFound
from src.storefront.core.models.product import ProductCreate, ProductUpdate
from src.storefront.core.services.storage.image_storage import (
    ImageStorageService,
    ImageUpload,
    StoredImage,
)
from src.storefront.entities.service.product import (
    Product,
    ProductQuery,
    ProductRepository,
    ProductStatus,
)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class ProductPage:
    products: list[Product]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


def parse_product_id(value: str) -> str:
    """Normalize a public product id, rejecting anything that is not a UUID."""
    try:
        return str(uuid.UUID(value))
    except (ValueError, TypeError) as exc:
        raise InvalidInput("Invalid product ID") from exc


class CatalogService:
    """Product CRUD, listing and image attachment."""

    def __init__(self, db_session: Session, image_storage: ImageStorageService):
        self._db_session = db_session
        self._product_repo = ProductRepository(db_session)
        self._image_storage = image_storage

    def _commit(self) -> None:
        try:
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

    def get(self, product_id: str) -> Product:
        product = self._product_repo.get(parse_product_id(product_id))
        if product is None:
            raise NotFound("Product not found")
        return product

    def create(self, data: ProductCreate, user_id: int) -> Product:
        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            stock=data.stock,
            category=data.category,
            brand=data.brand,
            sku=data.sku,
            status=data.status or ProductStatus.ACTIVE,
            created_by=user_id,
            updated_by=user_id,
        )
        created = self._product_repo.create(product)
        self._commit()
        logger.info("Product {} created by user {}", created.uuid, user_id)
        return created

    def update(self, product_id: str, data: ProductUpdate, user_id: int) -> Product:
        """Apply the non-empty fields of ``data`` to the product."""
        product = self.get(product_id)
        changed = product.model_copy(update={**data.changes(), "updated_by": user_id})
        updated = self._product_repo.update(changed)
        self._commit()
        logger.info("Product {} updated by user {}", updated.uuid, user_id)
        return updated

    def delete(self, product_id: str, user_id: int) -> None:
        """Soft delete the product, then remove its image file best-effort."""
        product = self.get(product_id)
        if not self._product_repo.soft_delete(product.uuid, deleted_by=user_id):
            raise NotFound("Product not found")
        self._commit()
        logger.info("Product {} deleted by user {}", product.uuid, user_id)

        self._image_storage.discard(product.image_path)

    def list_products(
        self,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        category: str | None = None,
        status: str | None = ProductStatus.ACTIVE.value,
        search: str | None = None,
    ) -> ProductPage:
        """Return one page of products, newest first.

        Non-positive ``page``/``limit`` fall back to the defaults and ``limit``
        is capped at ``MAX_LIMIT``. An empty ``status`` lists every status.
        """
        if page < 1:
            page = DEFAULT_PAGE
        if limit < 1:
            limit = DEFAULT_LIMIT
        limit = min(limit, MAX_LIMIT)

        query = ProductQuery(
            category=category or None,
            status=status or None,
            search=search or None,
        )
        products, total = self._product_repo.search(
            query, offset=(page - 1) * limit, limit=limit
        )
        return ProductPage(products=products, page=page, limit=limit, total=total)

    def categories(self) -> list[str]:
        return self._product_repo.categories()

    def attach_image(self, product_id: str, upload: ImageUpload, user_id: int) -> StoredImage:
        """Store ``upload`` as the product image, replacing any previous one.

        The product row is committed before the old file is removed. If the
        commit fails the freshly written file is deleted again and
        ``InternalError`` is raised.
        """
        product = self.get(product_id)

        def point_product_at(stored: StoredImage) -> None:
            changed = product.model_copy(
                update={
                    "image_path": stored.path,
                    "image_url": stored.url,
                    "updated_by": user_id,
                }
            )
            try:
                self._product_repo.update(changed)
                self._db_session.commit()
            except (SQLAlchemyError, ValueError) as exc:
                self._db_session.rollback()
                logger.error(
                    "Failed to update product {} with image info: {}", product.uuid, exc
                )
                raise InternalError("Failed to update product with image info") from exc

        stored = self._image_storage.replace(
            upload, old_path=product.image_path, on_saved=point_product_at
        )
        logger.info("Image {} attached to product {}", stored.path, product.uuid)
        return stored
