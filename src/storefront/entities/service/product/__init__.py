"""Entity package: Product."""

from .entity import Product, ProductStatus
from .repository import ProductQuery, ProductRepository
from .table import ProductTable

__all__ = ["Product", "ProductQuery", "ProductRepository", "ProductStatus", "ProductTable"]
