"""Schema management."""

from loguru import logger
from sqlmodel import SQLModel

from src.storefront.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, database_service: DbSessionService):
        self._engine = database_service.engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.storefront.entities.core.user import UserTable  # noqa: F401
        from src.storefront.entities.service.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")
