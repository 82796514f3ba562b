"""Registration and login endpoints."""

from fastapi import APIRouter, Depends, status

from src.storefront.api.http.deps import get_account_service
from src.storefront.api.http.schemas import (
    LoginRequest,
    LoginResponse,
    RegisteredUser,
    RegisterRequest,
)
from src.storefront.core.services import AccountService

router = APIRouter(tags=["auth"])


@router.post(
    "/register", response_model=RegisteredUser, status_code=status.HTTP_201_CREATED
)
def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> RegisteredUser:
    """Create an account. A duplicate email is rejected with 400."""
    user = accounts.register(body.name, body.email, body.password)
    return RegisteredUser.from_entity(user)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Exchange credentials for a bearer token."""
    result = accounts.login(body.email, body.password)
    return LoginResponse(token=result.token, name=result.name, email=result.email)
