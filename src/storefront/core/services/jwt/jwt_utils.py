import base64
import json
from dataclasses import dataclass
from typing import Any, Final

from src.storefront.core.errors import InvalidToken

# ---------------- tunables ----------------
MAX_JWT_CHARS: Final = 4096
MAX_HEADER_BYTES: Final = 8 * 1024
MAX_PAYLOAD_BYTES: Final = 64 * 1024
_ALLOWED: Final = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_."
)  # no '='


# --------------- one-pass prefilter ---------------
def _prefilter_compact_jwt(token: str) -> tuple[str, str, str]:
    if not token or len(token) > MAX_JWT_CHARS:
        raise InvalidToken("Invalid token size")
    if any(ch not in _ALLOWED for ch in token):
        raise InvalidToken("Invalid token characters")
    parts = token.split(".")
    # require exactly two dots and non-empty segments
    if len(parts) != 3 or not all(parts):
        raise InvalidToken("Invalid token format")
    h, p, s = parts
    return h, p, s


def _b64url_decode_unpadded(seg: str, what: str, max_bytes: int) -> bytes:
    pad = (-len(seg)) % 4
    try:
        raw = base64.urlsafe_b64decode((seg + "=" * pad).encode("ascii"))
    except ValueError as e:
        raise InvalidToken(f"Invalid base64url in {what}") from e
    if len(raw) > max_bytes:
        raise InvalidToken(f"{what} too large")
    return raw


def _decode_json_object(raw: bytes, what: str) -> dict[str, Any]:
    try:
        obj = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise InvalidToken(f"Non-UTF8 {what}") from e
    except json.JSONDecodeError as e:
        raise InvalidToken(f"Invalid JSON in {what}") from e
    if not isinstance(obj, dict):
        raise InvalidToken(f"{what} must be a JSON object")
    return obj


@dataclass(frozen=True)
class JwtPreview:
    header: dict[str, Any]
    claims: dict[str, Any]
    alg: str | None


def preview_jwt(token: str) -> JwtPreview:
    """Split and decode header+payload exactly once, without verifying anything."""
    h_seg, p_seg, _ = _prefilter_compact_jwt(token)
    header = _decode_json_object(
        _b64url_decode_unpadded(h_seg, "token header", MAX_HEADER_BYTES), "token header"
    )
    claims = _decode_json_object(
        _b64url_decode_unpadded(p_seg, "token payload", MAX_PAYLOAD_BYTES),
        "token payload",
    )
    alg = header.get("alg")
    return JwtPreview(
        header=header,
        claims=claims,
        alg=alg if isinstance(alg, str) else None,
    )


def extract_user_id(claims: dict[str, Any]) -> int:
    """Return the numeric ``user_id`` claim.

    JSON numbers may arrive as floats; integral values are accepted, booleans
    and strings are not.
    """
    value = claims.get("user_id")
    if isinstance(value, bool) or value is None:
        raise InvalidToken("Token has no user_id")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidToken("Token has no user_id")
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise InvalidToken("Token has no user_id")
    return value
