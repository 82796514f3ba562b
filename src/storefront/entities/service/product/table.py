"""Product database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.storefront.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    ``sku`` is nullable and unique: products without a SKU store NULL, which
    never collides with another NULL.
    """

    name: str = Field(max_length=255, nullable=False)
    description: str = Field(default="", sa_type=sa.Text)
    price: float = Field(nullable=False)
    stock: int = Field(default=0, nullable=False)
    category: str = Field(max_length=255, index=True, nullable=False)
    brand: str = Field(default="", max_length=255)
    sku: str | None = Field(default=None, max_length=128, unique=True)
    image_path: str | None = Field(default=None, max_length=512)
    image_url: str | None = Field(default=None, max_length=1024)
    status: str = Field(default="active", max_length=32, index=True)
    created_by: int | None = Field(default=None, foreign_key="usertable.id")
    updated_by: int | None = Field(default=None, foreign_key="usertable.id")
