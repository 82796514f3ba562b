"""Unit tests for the user entity package.

Tests the hybrid entity structure where domain model, database model,
and repository are colocated in the same package.
"""

from uuid import UUID

import pytest
from sqlmodel import Session

from src.storefront.core.errors import Conflict
from src.storefront.entities.core.user import User, UserRepository


def _user(email: str = "test@example.com", name: str = "Test User") -> User:
    return User(name=name, email=email, password_hash="$2b$04$not-a-real-hash")


class TestUser:
    """Test the User domain entity."""

    def test_user_creation_with_defaults(self):
        """User should get a public UUID but no database id until persisted."""
        user = _user()

        assert user.id is None
        UUID(user.uuid)  # Raises ValueError if invalid
        assert user.deleted_at is None
        assert not user.is_deleted

    def test_password_hash_is_never_serialized(self):
        """The hash must not leak through model_dump or repr."""
        user = _user()

        assert "password_hash" not in user.model_dump()
        assert "password_hash" not in user.model_dump_json()
        assert "not-a-real-hash" not in repr(user)

    def test_equality_ignores_timestamps(self):
        user = _user()
        same = user.model_copy(update={"updated_at": user.updated_at.replace(year=2000)})

        assert user == same
        assert hash(user) == hash(same)


class TestUserRepository:
    """Test UserRepository against an in-memory database."""

    def test_create_assigns_numeric_id(self, session: Session):
        repo = UserRepository(session)

        created = repo.create(_user())
        session.commit()

        assert isinstance(created.id, int)
        assert created.id >= 1
        assert created.password_hash

    def test_get_and_get_by_email(self, session: Session):
        repo = UserRepository(session)
        created = repo.create(_user("lookup@example.com"))
        session.commit()

        assert repo.get(created.id) == created
        assert repo.get_by_email("lookup@example.com") == created
        assert repo.get(created.id + 100) is None
        assert repo.get_by_email("nobody@example.com") is None

    def test_duplicate_email_raises_conflict(self, session: Session):
        repo = UserRepository(session)
        repo.create(_user("dup@example.com"))
        session.commit()

        with pytest.raises(Conflict, match="Email already registered"):
            repo.create(_user("dup@example.com", name="Someone Else"))

        assert repo.count() == 1

    def test_list_page_and_count(self, session: Session):
        repo = UserRepository(session)
        for i in range(7):
            repo.create(_user(f"user{i}@example.com", name=f"User {i}"))
        session.commit()

        first = repo.list_page(offset=0, limit=5)
        second = repo.list_page(offset=5, limit=5)

        assert repo.count() == 7
        assert [u.name for u in first] == [f"User {i}" for i in range(5)]
        assert [u.name for u in second] == ["User 5", "User 6"]
