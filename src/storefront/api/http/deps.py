"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from loguru import logger
from sqlmodel import Session

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.errors import TokenError, Unauthorized
from src.storefront.core.models import Identity
from src.storefront.core.security import PasswordHasher
from src.storefront.core.services import (
    AccountService,
    CatalogService,
    ImageStorageService,
    TokenService,
)

BEARER_PREFIX = "Bearer "


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session scoped to the request."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_token_service(request: Request) -> TokenService:
    """Get the token service instance."""
    return get_app_dependencies(request).token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    """Get the password hasher instance."""
    return get_app_dependencies(request).password_hasher


def get_image_storage(request: Request) -> ImageStorageService:
    """Get the image storage service instance."""
    return get_app_dependencies(request).image_storage


def get_account_service(
    request: Request,
    db: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
) -> AccountService:
    app_deps = get_app_dependencies(request)
    return AccountService(
        db,
        hasher,
        token_service,
        unify_login_errors=app_deps.config.security.unify_login_errors,
    )


def get_catalog_service(
    db: Session = Depends(get_db_session),
    image_storage: ImageStorageService = Depends(get_image_storage),
) -> CatalogService:
    return CatalogService(db, image_storage)


def get_current_identity(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> Identity:
    """Authenticate the request using a Bearer token.

    Raises:
        Unauthorized: The header is missing, is not a Bearer token, or the
            token fails verification
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise Unauthorized("Token not found")

    token = auth_header[len(BEARER_PREFIX) :].strip()
    try:
        user_id = token_service.verify(token)
    except TokenError as e:
        logger.info("Rejected bearer token: {}", e.message)
        raise Unauthorized(e.message) from e

    return Identity(user_id=user_id)
