"""User domain entity."""

from typing import Any

from pydantic import Field

from src.storefront.entities.core._base import Entity


class User(Entity):
    """A registered account.

    The password hash is excluded from serialization so it can never leak
    through a response model or a log line built from ``model_dump``.
    """

    name: str = Field(description="Display name")
    email: str = Field(description="Unique login email address")
    password_hash: str = Field(exclude=True, repr=False, description="bcrypt digest")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.uuid == other.uuid
            and self.name == other.name
            and self.email == other.email
        )

    def __hash__(self) -> int:
        return hash((self.id, self.uuid, self.name, self.email))
