"""User database table model."""

from sqlmodel import Field

from src.storefront.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    Email uniqueness is enforced here, by the database, so concurrent
    registrations with the same address cannot both succeed.
    """

    name: str = Field(max_length=255)
    email: str = Field(max_length=320, unique=True, index=True)
    password_hash: str = Field(max_length=255)
