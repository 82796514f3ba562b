from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, or_, select

from src.storefront.core.errors import Conflict, InternalError
from src.storefront.entities.core._base import utc_now
from src.storefront.entities.service.product.entity import Product
from src.storefront.entities.service.product.table import ProductTable

_MUTABLE_FIELDS = (
    "name",
    "description",
    "price",
    "stock",
    "category",
    "brand",
    "sku",
    "image_path",
    "image_url",
    "status",
    "updated_by",
)


@dataclass
class ProductQuery:
    """Filters for listing products. ``None`` disables a filter."""

    category: str | None = None
    status: str | None = "active"
    search: str | None = None


class ProductRepository:
    """Data-access layer for products. Soft-deleted rows are never returned."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_row(self, product_uuid: str) -> ProductTable | None:
        statement = select(ProductTable).where(
            ProductTable.uuid == product_uuid, ProductTable.deleted_at.is_(None)
        )
        return self._session.exec(statement).first()

    def get(self, product_uuid: str) -> Product | None:
        row = self._get_row(product_uuid)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def create(self, product: Product) -> Product:
        row = ProductTable(
            uuid=product.uuid,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            category=product.category,
            brand=product.brand,
            sku=product.sku,
            image_path=product.image_path,
            image_url=product.image_url,
            status=product.status.value,
            created_by=product.created_by,
            updated_by=product.updated_by,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
        self._session.add(row)
        self._flush(row)
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def update(self, product: Product) -> Product:
        """Write the mutable fields of ``product`` to its row.

        Raises:
            ValueError: If the product does not exist or was deleted
            Conflict: If the new SKU belongs to another product
        """
        row = self._get_row(product.uuid)
        if row is None:
            raise ValueError(f"Product with uuid {product.uuid} not found")

        for field in _MUTABLE_FIELDS:
            value = getattr(product, field)
            setattr(row, field, value.value if field == "status" else value)
        row.updated_at = utc_now()

        self._session.add(row)
        self._flush(row)
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def soft_delete(self, product_uuid: str, deleted_by: int | None = None) -> bool:
        row = self._get_row(product_uuid)
        if row is None:
            return False
        row.deleted_at = utc_now()
        if deleted_by is not None:
            row.updated_by = deleted_by
        self._session.add(row)
        self._flush(row)
        return True

    def search(
        self, query: ProductQuery, offset: int, limit: int
    ) -> tuple[list[Product], int]:
        """Return one page of matching products (newest first) and the total match count."""
        conditions = [ProductTable.deleted_at.is_(None)]
        if query.category:
            conditions.append(ProductTable.category == query.category)
        if query.status:
            conditions.append(ProductTable.status == query.status)
        if query.search:
            pattern = f"%{query.search}%"
            conditions.append(
                or_(
                    ProductTable.name.ilike(pattern),
                    ProductTable.description.ilike(pattern),
                )
            )

        total = self._session.exec(
            select(func.count()).select_from(ProductTable).where(*conditions)
        ).one()
        rows = self._session.exec(
            select(ProductTable)
            .where(*conditions)
            .order_by(ProductTable.created_at.desc(), ProductTable.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows], total

    def categories(self) -> list[str]:
        statement = (
            select(ProductTable.category)
            .where(ProductTable.deleted_at.is_(None), ProductTable.category != "")
            .distinct()
            .order_by(ProductTable.category)
        )
        return list(self._session.exec(statement).all())

    def _sku_taken(self, sku: str, product_uuid: str) -> bool:
        # Soft-deleted products keep their SKU reserved.
        statement = select(ProductTable.id).where(
            ProductTable.sku == sku, ProductTable.uuid != product_uuid
        )
        return self._session.exec(statement).first() is not None

    def _flush(self, row: ProductTable) -> None:
        """Flush pending changes for ``row``.

        Only a SKU collision is reported as ``Conflict``; any other constraint
        failure (e.g. an unknown ``created_by`` user) is an ``InternalError``.
        """
        sku, product_uuid = row.sku, row.uuid
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            if sku is not None and self._sku_taken(sku, product_uuid):
                raise Conflict("SKU already exists") from exc
            logger.error("Failed to save product {}: {}", product_uuid, exc.orig)
            raise InternalError("Failed to save product") from exc
