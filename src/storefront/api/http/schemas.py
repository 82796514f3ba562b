"""Request and response bodies of the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.storefront.entities.core.user import User
from src.storefront.entities.service.product import Product


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    name: str
    email: str


class RegisteredUser(BaseModel):
    id: int
    uuid: str
    name: str
    email: str

    @classmethod
    def from_entity(cls, user: User) -> "RegisteredUser":
        return cls(id=user.id, uuid=user.uuid, name=user.name, email=user.email)


class UserProfile(BaseModel):
    id: int
    name: str
    email: str


class UserSummary(BaseModel):
    uuid: str
    name: str
    email: str


class UserListResponse(BaseModel):
    """Paginated user list. Field names are camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    data: list[UserSummary]
    page: int
    page_size: int = Field(alias="pageSize")
    total: int
    total_pages: int = Field(alias="totalPages")


class ProductOut(BaseModel):
    """Public view of a product. ``id`` is the product's UUID."""

    id: str
    name: str
    description: str
    price: float
    stock: int
    category: str
    brand: str
    sku: str | None
    image_url: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.uuid,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            category=product.category,
            brand=product.brand,
            sku=product.sku,
            image_url=product.image_url,
            status=product.status.value,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductEnvelope(BaseModel):
    message: str
    data: ProductOut


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ProductListResponse(BaseModel):
    message: str
    data: list[ProductOut]
    pagination: Pagination


class CategoriesResponse(BaseModel):
    message: str
    data: list[str]


class MessageResponse(BaseModel):
    message: str


class ImageUploadResponse(BaseModel):
    message: str
    image_url: str
