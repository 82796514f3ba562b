"""Core services exports."""

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# JWT Services
from .jwt.token_service import TokenService

# Domain Services
from .product.catalog_service import CatalogService, ProductPage
from .storage.image_storage import ImageStorageService, ImageUpload, StoredImage
from .user.account_service import AccountService, LoginResult, UserPage

__all__ = [
    # Database Service
    "DbManageService",
    "DbSessionService",
    # JWT Services
    "TokenService",
    # Storage
    "ImageStorageService",
    "ImageUpload",
    "StoredImage",
    # Domain Services
    "AccountService",
    "LoginResult",
    "UserPage",
    "CatalogService",
    "ProductPage",
]
