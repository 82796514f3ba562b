"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.storefront.api.http.app_data import ApplicationDependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is serving requests."""
    return {"status": "healthy", "service": "storefront"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe. Returns 503 when the database or upload directory is unavailable."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies

    checks: dict[str, dict[str, Any]] = {}
    all_healthy = True

    db_healthy = app_deps.database_service.health_check()
    checks["database"] = {
        "status": "healthy" if db_healthy else "unhealthy",
        "type": "sqlite" if app_deps.config.database.is_sqlite else "server",
    }
    all_healthy = all_healthy and db_healthy

    uploads_ready = app_deps.image_storage.directory.is_dir()
    checks["uploads"] = {"status": "healthy" if uploads_ready else "unhealthy"}
    all_healthy = all_healthy and uploads_ready

    body = {"status": "ready" if all_healthy else "not_ready", "checks": checks}
    if not all_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
