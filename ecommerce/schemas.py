# ecommerce/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Decimal in Python, plain number in JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).+$")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(CamelModel, Generic[T]):
    status_code: int = 200
    message: str
    data: Optional[T] = None


# ---------- auth ----------
class RegistrationIn(CamelModel):
    full_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    role: Literal["User", "Admin"]

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not PASSWORD_RULE.match(v):
            raise ValueError(
                "Password must contain at least one uppercase, one lowercase, one digit, and one special character."
            )
        return v


class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthOut(CamelModel):
    id: int
    full_name: str
    email: str
    role: str


# ---------- categories ----------
class CategoryIn(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)


class ChangeCategoryNameIn(CamelModel):
    category_id: int = Field(ge=1)
    new_name: str = Field(min_length=1, max_length=50)


class CategoryOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    is_deleted: bool = False


# ---------- products ----------
class ProductCreateIn(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    image_url: HttpUrl
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(ge=0)
    category_id: int = Field(ge=1)


class ProductUpdateIn(CamelModel):
    id: int = Field(ge=1)
    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[HttpUrl] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    is_available: bool = True


class RestockIn(CamelModel):
    product_id: int = Field(ge=1)
    quantity_to_add: int = Field(ge=1)


class BulkDeleteIn(CamelModel):
    product_ids: List[int] = Field(min_length=1)


class BulkDeleteOut(CamelModel):
    total_deleted: int = 0
    not_found_ids: List[int] = []
    message: str = ""


class ProductOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: float
    stock_status: str
    is_available: bool
    category_id: int
    category_name: Optional[str] = None


class AdminProductOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: float
    stock: Optional[int] = None
    is_available: bool
    category_id: int
    category_name: Optional[str] = None
    is_deleted: bool


class PaginationParams(CamelModel):
    """Normalized listing request; built from query parameters by the router."""
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=10, ge=1, le=100)
    search_term: Optional[str] = Field(default=None, max_length=100)
    category_id: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None
    sort_by_price: Optional[str] = None
    sort_by_quantity: Optional[str] = None
    include_deleted: bool = False


class PaginatedOut(CamelModel, Generic[T]):
    total_count: int
    offset: int
    limit: int
    current_page_count: int
    has_more: bool
    data: List[T] = []


# ---------- cart ----------
class AddToCartIn(CamelModel):
    product_id: int = Field(ge=1)
    quantity: int


class UpdateCartItemIn(CamelModel):
    cart_item_id: int
    quantity: int


class CartItemOut(CamelModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    price_at_add_time: float
    product_name: Optional[str] = None
    product_image_url: Optional[str] = None
    total_price: float


class CartOut(CamelModel):
    id: int = 0
    user_id: int
    cart_items: List[CartItemOut] = []
    total_price: float = 0.0
    total_items: int = 0
    created_at: datetime
    updated_at: datetime


# ---------- bulk import ----------
class ImportRow(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[Money] = None
    stock: Optional[int] = None
    category_name: Optional[str] = None
    is_available: Optional[bool] = None


class ImportPreviewOut(CamelModel):
    total_records: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    preview_data: List[ImportRow] = []
    errors: List[str] = []


class ImportResultOut(CamelModel):
    total_inserted: int = 0
    total_updated: int = 0
    total_failed: int = 0
    error_messages: List[str] = []
    message: str = ""


# ---------- cloudinary ----------
class UploadConfigOut(CamelModel):
    cloud_name: str
    upload_preset: str
