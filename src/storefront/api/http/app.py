"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.api.http.error_handlers import register_exception_handlers
from src.storefront.api.http.routers import auth, health, products, users
from src.storefront.api.utils.app_startup import configure_logging
from src.storefront.core.security import PasswordHasher
from src.storefront.core.services import (
    DbManageService,
    DbSessionService,
    ImageStorageService,
    TokenService,
)
from src.storefront.runtime.config.config_data import ConfigData
from src.storefront.runtime.context import get_config


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        response.headers.setdefault(
            "Permissions-Policy", "geolocation=(), microphone=()"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    # Query strings are not logged; they may carry search terms or tokens.
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


# --- Lifecycle hooks ---
def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Construct the application-wide services.

    Any failure here aborts startup: a missing signing secret, an unreachable
    database, schema creation or an upload directory that cannot be created.
    """
    token_service = TokenService.from_config(config.jwt)
    password_hasher = PasswordHasher.from_config(config.security)

    database_service = DbSessionService(config.database, config.app.environment)
    if not database_service.health_check():
        raise RuntimeError("Database is not reachable")
    DbManageService(database_service).create_all()

    image_storage = ImageStorageService.from_config(config.uploads)
    image_storage.ensure_directory()

    return ApplicationDependencies(
        database_service=database_service,
        token_service=token_service,
        password_hasher=password_hasher,
        image_storage=image_storage,
        config=config,
    )


async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies(config)
        app.state.owns_dependencies = True


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    # Injected dependencies belong to the caller.
    if app_dependencies is not None and getattr(app.state, "owns_dependencies", False):
        app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the FastAPI application.

    ``dependencies`` is used as-is when given (tests); otherwise the services
    are built from the active configuration during startup.
    """
    config = dependencies.config if dependencies is not None else get_config()
    is_production = config.app.environment == "production"

    app = FastAPI(
        title="Storefront API",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    app.state.app_dependencies = dependencies

    app.add_middleware(SecurityHeadersMiddleware)

    # --- CORS configuration ---
    cors = config.app.cors
    if is_production and "*" in cors.origins and cors.allow_credentials:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    # --- Router registration ---
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)

    uploads = config.uploads
    app.mount(
        f"/{uploads.url_prefix.strip('/')}",
        StaticFiles(directory=uploads.root, check_dir=False),
        name="uploads",
    )
    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
