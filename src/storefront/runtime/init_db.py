"""Database initialization script."""

from src.storefront.core.services.database.db_manage import DbManageService
from src.storefront.core.services.database.db_session import DbSessionService
from src.storefront.runtime.context import get_config


def init_db() -> None:
    """Create all database tables."""
    main_config = get_config()
    database_service = DbSessionService(main_config.database, main_config.app.environment)
    try:
        DbManageService(database_service).create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
