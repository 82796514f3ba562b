import base64
import io
import json
import time

from authlib.jose import jwt

from src.storefront.core.services import ImageUpload


def encode_token(claims: dict, secret: str, alg: str = "HS256") -> str:
    """Sign arbitrary claims, bypassing TokenService."""
    token = jwt.encode({"alg": alg, "typ": "JWT"}, claims, secret)
    return token.decode("ascii") if isinstance(token, bytes) else token


def image_upload(filename: str = "photo.png", size: int = 1024, declared: bool = True) -> ImageUpload:
    """An in-memory upload of ``size`` bytes."""
    body = b"\0" * size
    return ImageUpload(
        filename=filename,
        stream=io.BytesIO(body),
        size=size if declared else None,
    )


class FakeClock:
    """Settable replacement for ``time.time``."""

    def __init__(self, now: float | None = None) -> None:
        self.now = float(int(now if now is not None else time.time()))

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def unsigned_token(claims: dict, signature: str = "") -> str:
    """A token with ``alg: none``, by default with an empty signature segment."""

    def _segment(data: dict) -> str:
        raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    return f"{_segment({'alg': 'none', 'typ': 'JWT'})}.{_segment(claims)}.{signature}"
