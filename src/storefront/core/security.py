"""Password hashing."""

import bcrypt

from src.storefront.runtime.config.config_data import SecurityConfig

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    @classmethod
    def from_config(cls, config: SecurityConfig) -> "PasswordHasher":
        return cls(rounds=config.bcrypt_rounds)

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt.

        Raises:
            ValueError: If the password is longer than bcrypt can handle
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError):
            return False
