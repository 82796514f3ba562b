"""Domain error hierarchy.

Services raise these; the HTTP layer maps them to a status code and a
``{"error": ..., "details": ...}`` body.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for every error the application reports to clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(StorefrontError):
    status_code = 400
    default_message = "Invalid request data"


class Unauthorized(StorefrontError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class Conflict(StorefrontError):
    # Kept at 400 to match the published API contract.
    status_code = 400
    default_message = "Resource already exists"


class InternalError(StorefrontError):
    status_code = 500


# Token verification


class TokenError(StorefrontError):
    status_code = 401
    default_message = "Invalid token"


class InvalidToken(TokenError):
    pass


class TokenExpired(TokenError):
    default_message = "Token has expired"


class BadSignature(TokenError):
    default_message = "Token signature verification failed"


# Image storage


class ImageTooLarge(InvalidInput):
    default_message = "File size exceeds maximum limit"


class UnsupportedImageType(InvalidInput):
    default_message = "Invalid file type"


class ImageStorageError(InternalError):
    default_message = "Failed to store image"
