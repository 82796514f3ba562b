from datetime import UTC, datetime
from uuid import uuid4

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

# Largest value an INTEGER column holds on every supported database.
MAX_INTEGER = 2**31 - 1


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity with a numeric surrogate key and a public UUID.

    ``id`` is assigned by the database and stays ``None`` until the entity
    has been persisted. ``uuid`` is the identifier exposed to clients.
    """

    id: int | None = PydanticField(
        default=None, description="Database surrogate key"
    )
    uuid: str = PydanticField(
        default_factory=lambda: str(uuid4()),
        description="Public unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utc_now)
    updated_at: datetime = PydanticField(default_factory=utc_now)
    deleted_at: datetime | None = PydanticField(default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class EntityTable(SQLModel, table=False):
    """Base table with an autoincrement key, a unique public UUID and soft delete."""

    id: int | None = Field(default=None, primary_key=True)
    uuid: str = Field(
        default_factory=lambda: str(uuid4()),
        max_length=36,
        unique=True,
        index=True,
        nullable=False,
    )

    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
    deleted_at: datetime | None = Field(default=None, index=True)
