"""Product write models shared by the HTTP layer and the catalog service."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.storefront.entities.core._base import MAX_INTEGER
from src.storefront.entities.service.product.entity import ProductStatus


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ProductCreate(BaseModel):
    """Fields accepted when creating a product."""

    name: str = Field(min_length=1, description="Product name")
    description: str = Field(default="", description="Free-form description")
    price: float = Field(ge=0, description="Unit price")
    stock: int = Field(default=0, ge=0, le=MAX_INTEGER, description="Units in stock")
    category: str = Field(min_length=1, description="Catalog category")
    brand: str = Field(default="", description="Brand name")
    sku: str | None = Field(default=None, description="Unique stock-keeping unit")
    status: ProductStatus | None = Field(default=None, description="Defaults to active")

    @field_validator("sku", "status", mode="before")
    @classmethod
    def blank_as_missing(cls, value: Any) -> Any:
        # An empty SKU is stored as NULL so SKU-less products never collide.
        return _blank_to_none(value)


class ProductUpdate(BaseModel):
    """Partial update. Empty strings and nulls leave the stored value unchanged."""

    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0, le=MAX_INTEGER)
    category: str | None = None
    brand: str | None = None
    sku: str | None = None
    status: ProductStatus | None = None

    @field_validator(
        "name", "description", "category", "brand", "sku", "status", mode="before"
    )
    @classmethod
    def blank_as_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def changes(self) -> dict[str, Any]:
        """Return only the fields that should be applied."""
        return {
            field: value
            for field, value in self.model_dump().items()
            if value is not None
        }
