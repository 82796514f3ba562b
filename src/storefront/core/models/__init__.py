from .identity import Identity
from .product import ProductCreate, ProductUpdate

__all__ = ["Identity", "ProductCreate", "ProductUpdate"]
