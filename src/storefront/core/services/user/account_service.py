from dataclasses import dataclass

from loguru import logger
from sqlmodel import Session

from src.storefront.core.errors import Conflict, InvalidCredentials, InvalidInput, NotFound
from src.storefront.core.security import MAX_PASSWORD_BYTES, PasswordHasher
from src.storefront.core.services.jwt.token_service import TokenService
from src.storefront.entities.core.user.entity import User
from src.storefront.entities.core.user.repository import UserRepository

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

UNIFIED_LOGIN_ERROR = "Invalid email or password"


@dataclass(frozen=True)
class LoginResult:
    token: str
    name: str
    email: str


@dataclass(frozen=True)
class UserPage:
    users: list[User]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size


class AccountService:
    """Registration, login and user lookup."""

    def __init__(
        self,
        db_session: Session,
        hasher: PasswordHasher,
        token_service: TokenService,
        unify_login_errors: bool = False,
    ):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._hasher = hasher
        self._token_service = token_service
        self._unify_login_errors = unify_login_errors

    def register(self, name: str, email: str, password: str) -> User:
        """Create an account.

        Raises:
            Conflict: The email is already registered
            InvalidInput: The password is too long to hash
        """
        if self._user_repo.get_by_email(email) is not None:
            raise Conflict("Email already registered")

        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        user = User(name=name, email=email, password_hash=self._hasher.hash(password))
        try:
            created = self._user_repo.create(user)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info("Registered user {}", created.id)
        return created

    def login(self, email: str, password: str) -> LoginResult:
        user = self._user_repo.get_by_email(email)
        if user is None:
            logger.info("Login rejected: unknown email")
            raise InvalidCredentials(
                UNIFIED_LOGIN_ERROR if self._unify_login_errors else "Email not found"
            )

        if not self._hasher.verify(password, user.password_hash):
            logger.info("Login rejected for user {}: wrong password", user.id)
            raise InvalidCredentials(
                UNIFIED_LOGIN_ERROR if self._unify_login_errors else "Wrong password"
            )

        token = self._token_service.issue(user.id)
        logger.info("User {} logged in", user.id)
        return LoginResult(token=token, name=user.name, email=user.email)

    def get_user(self, user_id: int) -> User:
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def list_users(self, page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> UserPage:
        """Return one page of users ordered by id. Values below 1 fall back to defaults."""
        if page < 1:
            page = DEFAULT_PAGE
        if page_size < 1:
            page_size = DEFAULT_PAGE_SIZE

        users = self._user_repo.list_page(offset=(page - 1) * page_size, limit=page_size)
        total = self._user_repo.count()
        return UserPage(users=users, page=page, page_size=page_size, total=total)
