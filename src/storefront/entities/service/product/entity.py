"""Entity: Product."""

from enum import StrEnum
from typing import Any

from pydantic import Field

from src.storefront.entities.core._base import MAX_INTEGER, Entity


class ProductStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"


class Product(Entity):
    """A catalog item.

    ``image_path`` is where the image file lives on disk and is only used to
    delete it; ``image_url`` is what clients display.
    """

    name: str = Field(min_length=1, description="Product name")
    description: str = Field(default="", description="Free-form description")
    price: float = Field(ge=0, description="Unit price")
    stock: int = Field(default=0, ge=0, le=MAX_INTEGER, description="Units in stock")
    category: str = Field(min_length=1, description="Catalog category")
    brand: str = Field(default="", description="Brand name")
    sku: str | None = Field(default=None, description="Unique stock-keeping unit")
    image_path: str | None = Field(default=None, description="Filesystem path of the image")
    image_url: str | None = Field(default=None, description="Public URL of the image")
    status: ProductStatus = Field(default=ProductStatus.ACTIVE)
    created_by: int | None = Field(default=None, description="User id of the creator")
    updated_by: int | None = Field(default=None, description="User id of the last editor")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.uuid == other.uuid
            and self.name == other.name
            and self.price == other.price
            and self.stock == other.stock
            and self.category == other.category
            and self.sku == other.sku
            and self.status == other.status
        )

    def __hash__(self) -> int:
        return hash((self.id, self.uuid, self.name, self.sku))
