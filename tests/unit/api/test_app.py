"""HTTP tests for application-wide behaviour: health, headers, error shapes."""

import pytest
from fastapi.testclient import TestClient

from src.storefront.api.http.app import build_dependencies, create_app
from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.entities.core.user import UserRepository
from src.storefront.runtime.config.config_data import ConfigData


class TestHealth:
    def test_liveness(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness(self, client: TestClient):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["database"]["status"] == "healthy"

    def test_readiness_reports_database_outage(
        self, app_dependencies: ApplicationDependencies, monkeypatch
    ):
        monkeypatch.setattr(app_dependencies.database_service, "health_check", lambda: False)
        client = TestClient(create_app(app_dependencies))

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["database"]["status"] == "unhealthy"


class TestMiddleware:
    def test_security_headers(self, client: TestClient):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client: TestClient):
        assert client.get("/health").headers["X-Request-ID"]

    def test_unknown_route_uses_error_shape(self, client: TestClient):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_unexpected_error_is_500(self, app_dependencies: ApplicationDependencies):
        app = create_app(app_dependencies)

        @app.get("/boom")
        def boom():
            raise RuntimeError("unexpected")

        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"


class TestStartup:
    def test_build_dependencies_prepares_storage_and_schema(self, test_config: ConfigData):
        deps = build_dependencies(test_config)
        try:
            assert deps.image_storage.directory.is_dir()
            assert deps.database_service.health_check()
            with deps.database_service.session_scope() as session:
                assert UserRepository(session).count() == 0
        finally:
            deps.database_service.dispose()

    def test_missing_secret_aborts_startup(self, test_config: ConfigData):
        config = test_config.model_copy(
            update={"jwt": test_config.jwt.model_copy(update={"secret": None})}
        )

        with pytest.raises(ValueError, match="secret"):
            build_dependencies(config)

    def test_injected_dependencies_survive_lifespan(
        self, app_dependencies: ApplicationDependencies
    ):
        with TestClient(create_app(app_dependencies)) as client:
            assert client.get("/health/ready").status_code == 200

        assert app_dependencies.database_service.health_check()
