"""JWT service package."""

from .jwt_utils import JwtPreview, preview_jwt
from .token_service import TokenService

__all__ = ["JwtPreview", "TokenService", "preview_jwt"]
