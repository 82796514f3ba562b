from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from sqlmodel import Session
from starlette.requests import Request

from src.storefront.core.services import DbManageService, DbSessionService
from src.storefront.runtime.config.config_data import ConfigData
from tests.utils import FakeClock

__all__ = [
    "jwt_secret",
    "clock",
    "test_config",
    "database_service",
    "session",
    "request_factory",
]

_JWT_SECRET = "storefront-test-secret"


@pytest.fixture
def jwt_secret() -> str:
    return _JWT_SECRET


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000)


@pytest.fixture
def test_config(tmp_path: Path, jwt_secret: str) -> ConfigData:
    """Configuration pointing at an in-memory database and a temporary upload root."""
    return ConfigData.model_validate(
        {
            "app": {"environment": "test"},
            "database": {"url": "sqlite://"},
            "jwt": {"secret": jwt_secret},
            "security": {"bcrypt_rounds": 4},
            "uploads": {
                "root": str(tmp_path / "uploads"),
                "public_base_url": "http://testserver",
            },
        }
    )


@pytest.fixture
def database_service(test_config: ConfigData) -> Generator[DbSessionService]:
    """A fresh in-memory database with all tables created."""
    service = DbSessionService(test_config.database, test_config.app.environment)
    DbManageService(service).create_all()
    try:
        yield service
    finally:
        service.dispose()


@pytest.fixture
def session(database_service: DbSessionService) -> Generator[Session]:
    """Create a fresh database session for testing."""
    db = database_service.get_session()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def request_factory() -> Callable[[dict[str, str]], Request]:
    def _make_request(headers: dict[str, str]) -> Request:
        scope = {
            "type": "http",
            "headers": [
                (name.lower().encode("ascii"), value.encode("latin-1"))
                for name, value in headers.items()
            ],
            "method": "GET",
            "path": "/",
            "query_string": b"",
        }
        return Request(scope)

    return _make_request
