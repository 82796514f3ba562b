"""User lookup endpoints. All of them require a bearer token."""

from fastapi import APIRouter, Depends, Path, Query

from src.storefront.api.http.deps import get_account_service, get_current_identity
from src.storefront.api.http.schemas import UserListResponse, UserProfile, UserSummary
from src.storefront.core.models import Identity
from src.storefront.core.services import AccountService
from src.storefront.entities.core._base import MAX_INTEGER

router = APIRouter(prefix="/user", tags=["users"])


# Registered before /{user_id} so "all" is not parsed as an id.
@router.get("/all", response_model=UserListResponse)
def list_users(
    page: int = Query(1, le=MAX_INTEGER),
    page_size: int = Query(10, alias="pageSize", le=MAX_INTEGER),
    identity: Identity = Depends(get_current_identity),
    accounts: AccountService = Depends(get_account_service),
) -> UserListResponse:
    result = accounts.list_users(page=page, page_size=page_size)
    return UserListResponse(
        data=[
            UserSummary(uuid=user.uuid, name=user.name, email=user.email)
            for user in result.users
        ],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        total_pages=result.total_pages,
    )


@router.get("/{user_id}", response_model=UserProfile)
def get_profile(
    user_id: int = Path(ge=1, le=MAX_INTEGER),
    identity: Identity = Depends(get_current_identity),
    accounts: AccountService = Depends(get_account_service),
) -> UserProfile:
    user = accounts.get_user(user_id)
    return UserProfile(id=user.id, name=user.name, email=user.email)
