"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class JWTConfig(BaseModel):
    """Bearer token configuration."""

    secret: str | None = Field(
        default=None, description="Symmetric secret used to sign and verify tokens"
    )
    algorithm: Literal["HS256"] = Field(
        default="HS256", description="The only signing algorithm accepted"
    )
    expires_in_seconds: int = Field(
        default=24 * 3600, description="Token lifetime in seconds (default: 24 hours)"
    )
    clock_skew: int = Field(
        default=0, description="Clock skew tolerance in seconds when checking exp"
    )


class SecurityConfig(BaseModel):
    """Password hashing and login behaviour."""

    bcrypt_rounds: int = Field(
        default=10, ge=4, le=31, description="bcrypt work factor (log2 rounds)"
    )
    unify_login_errors: bool = Field(
        default=False,
        description="Report unknown email and wrong password with the same message",
    )


class UploadsConfig(BaseModel):
    """Local image storage configuration."""

    root: str = Field(default="uploads", description="Directory served under url_prefix")
    subdirectory: str = Field(
        default="products", description="Directory below root holding product images"
    )
    url_prefix: str = Field(default="uploads", description="Public URL path for root")
    public_base_url: str = Field(
        default="http://localhost:8081",
        description="Scheme, host and port used to build public image URLs",
    )
    max_size_mb: int = Field(default=10, description="Maximum upload size in MiB")
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [".jpg", ".jpeg", ".png", ".gif", ".webp"],
        description="Accepted file extensions (lower-case, with leading dot)",
    )

    @computed_field
    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * 1024 * 1024


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./storefront.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Log every SQL statement")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password from a secrets file or environment variable.

        The file takes precedence. Returns None when neither is configured, in which
        case the URL is used exactly as given.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return password
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password
        if resolved_password is None:
            return self.url

        if base_url.password and base_url.password != resolved_password:
            logger.warning(
                "Database password from secrets does not match the one in the URL. "
                "Using password from secrets."
            )
        return base_url.set(password=resolved_password).render_as_string(
            hide_password=False
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        return self.is_sqlite and (self.url in ("sqlite://", "sqlite:///:memory:"))


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Interface the server binds to")
    port: int = Field(default=8081, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="Bearer token configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    uploads: UploadsConfig = Field(
        default_factory=UploadsConfig, description="Image upload configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
