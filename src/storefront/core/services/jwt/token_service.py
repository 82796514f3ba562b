"""Bearer token issuing and verification."""

import time
from collections.abc import Callable

from authlib.jose import JsonWebToken
from authlib.jose.errors import (
    BadSignatureError,
    DecodeError,
    ExpiredTokenError,
    JoseError,
    MissingClaimError,
    UnsupportedAlgorithmError,
)
from loguru import logger

from src.storefront.core.errors import BadSignature, InvalidToken, TokenExpired
from src.storefront.core.services.jwt.jwt_utils import extract_user_id, preview_jwt
from src.storefront.runtime.config.config_data import JWTConfig

ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 24 * 3600


class TokenService:
    """Issue and verify HS256 tokens carrying a numeric ``user_id`` claim.

    Only HS256 is accepted. The algorithm named in the token header is checked
    before any key material is used, so ``none`` and asymmetric algorithms are
    rejected outright instead of being handed to the decoder.
    """

    def __init__(
        self,
        secret: str | None,
        expires_in_seconds: int = DEFAULT_TTL_SECONDS,
        clock_skew: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("JWT signing secret not configured")
        self._secret = secret
        self._expires_in_seconds = expires_in_seconds
        self._clock_skew = clock_skew
        self._clock = clock
        self._jwt = JsonWebToken([ALGORITHM])

    @classmethod
    def from_config(cls, config: JWTConfig) -> "TokenService":
        return cls(
            secret=config.secret,
            expires_in_seconds=config.expires_in_seconds,
            clock_skew=config.clock_skew,
        )

    def issue(self, user_id: int) -> str:
        """Return a signed token for ``user_id`` valid for the configured lifetime."""
        now = int(self._clock())
        header = {"alg": ALGORITHM, "typ": "JWT"}
        payload = {
            "user_id": user_id,
            "iat": now,
            "exp": now + self._expires_in_seconds,
        }
        token = self._jwt.encode(header, payload, self._secret)
        return token.decode() if isinstance(token, bytes) else token

    def verify(self, token: str) -> int:
        """Verify ``token`` and return the user id it was issued for.

        Raises:
            BadSignature: wrong algorithm or signature mismatch
            TokenExpired: the ``exp`` claim is in the past
            InvalidToken: malformed token or missing/invalid claims
        """
        preview = preview_jwt(token)
        if preview.alg != ALGORITHM:
            logger.debug("Rejected token signed with algorithm {}", preview.alg)
            raise BadSignature(f"Unexpected signing method: {preview.alg}")

        try:
            claims = self._jwt.decode(
                token,
                self._secret,
                claims_options={"exp": {"essential": True}},
            )
            claims.validate(now=int(self._clock()), leeway=self._clock_skew)
        except BadSignatureError as exc:
            raise BadSignature() from exc
        except UnsupportedAlgorithmError as exc:
            raise BadSignature(f"Unexpected signing method: {preview.alg}") from exc
        except ExpiredTokenError as exc:
            raise TokenExpired() from exc
        except MissingClaimError as exc:
            raise InvalidToken(f"Token is missing claim: {exc.description}") from exc
        except (DecodeError, JoseError, ValueError) as exc:
            raise InvalidToken() from exc

        return extract_user_id(claims)
