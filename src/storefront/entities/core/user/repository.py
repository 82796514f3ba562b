from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from src.storefront.core.errors import Conflict
from src.storefront.entities.core.user.entity import User
from src.storefront.entities.core.user.table import UserTable


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None or row.deleted_at is not None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(
            UserTable.email == email, UserTable.deleted_at.is_(None)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def create(self, user: User) -> User:
        """Insert a user; a duplicate email raises Conflict and rolls back."""
        row = UserTable(
            uuid=user.uuid,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise Conflict("Email already registered") from exc
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def list_page(self, offset: int, limit: int) -> list[User]:
        statement = (
            select(UserTable)
            .where(UserTable.deleted_at.is_(None))
            .order_by(UserTable.id)
            .offset(offset)
            .limit(limit)
        )
        return [
            User.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

    def count(self) -> int:
        statement = (
            select(func.count()).select_from(UserTable).where(UserTable.deleted_at.is_(None))
        )
        return self._session.exec(statement).one()
