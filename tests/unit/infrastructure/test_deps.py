"""Unit tests for the bearer-token auth gate."""

from collections.abc import Callable

import pytest
from starlette.requests import Request

from src.storefront.api.http.deps import get_current_identity
from src.storefront.core.errors import Unauthorized
from src.storefront.core.models import Identity
from src.storefront.core.services import TokenService
from tests.utils import FakeClock

RequestFactory = Callable[[dict[str, str]], Request]


class TestCurrentIdentity:
    def test_valid_token_yields_identity(
        self, request_factory: RequestFactory, token_service: TokenService
    ):
        request = request_factory({"Authorization": f"Bearer {token_service.issue(12)}"})

        identity = get_current_identity(request, token_service)

        assert identity == Identity(user_id=12)

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": ""},
            {"Authorization": "Token abc"},
            {"Authorization": "bearer abc"},
            {"Authorization": "Basic dXNlcjpwYXNz"},
        ],
    )
    def test_missing_or_non_bearer_header(
        self,
        request_factory: RequestFactory,
        token_service: TokenService,
        headers: dict[str, str],
    ):
        with pytest.raises(Unauthorized, match="Token not found"):
            get_current_identity(request_factory(headers), token_service)

    def test_expired_token(
        self,
        request_factory: RequestFactory,
        token_service: TokenService,
        clock: FakeClock,
    ):
        token = token_service.issue(1)
        clock.advance(24 * 3600 + 1)

        with pytest.raises(Unauthorized) as exc_info:
            get_current_identity(
                request_factory({"Authorization": f"Bearer {token}"}), token_service
            )

        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.message

    def test_garbage_token(
        self, request_factory: RequestFactory, token_service: TokenService
    ):
        with pytest.raises(Unauthorized):
            get_current_identity(
                request_factory({"Authorization": "Bearer not.a.jwt"}), token_service
            )

    def test_token_from_other_secret(
        self,
        request_factory: RequestFactory,
        token_service: TokenService,
        clock: FakeClock,
    ):
        foreign = TokenService("someone-elses-secret", clock=clock).issue(1)

        with pytest.raises(Unauthorized):
            get_current_identity(
                request_factory({"Authorization": f"Bearer {foreign}"}), token_service
            )
