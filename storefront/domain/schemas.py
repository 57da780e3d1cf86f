# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from storefront.domain.order_status import OrderStatus

CartStatus = Literal["active", "checkout", "abandoned"]


class ApiModel(BaseModel):
    """Base for every DTO: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(ApiModel):
    message: str


# users
class UserRegister(ApiModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)


class UserUpdate(ApiModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    is_active: Optional[bool] = None


class UserOut(ApiModel):
    """Public view of a user; the password hash is deliberately absent."""

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    is_email_verified: bool
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginIn(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    guest_cart_id: Optional[int] = Field(None, gt=0)


class LoginOut(ApiModel):
    message: str
    user: UserOut


# categories
class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    parent_category_id: Optional[int] = Field(None, gt=0)
    is_active: bool = True


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    parent_category_id: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class CategoryOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    parent_category_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# products
class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    category_id: Optional[int] = Field(None, gt=0)
    sku: Optional[str] = Field(None, max_length=64)
    image_url: Optional[str] = None
    is_active: bool = True


class ProductUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, gt=0)
    sku: Optional[str] = Field(None, max_length=64)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class ProductOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    category_id: Optional[int] = None
    sku: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# carts
class CreateCartIn(ApiModel):
    """Either userId (authenticated cart) or sessionId (guest cart)."""

    user_id: Optional[int] = Field(None, gt=0)
    session_id: Optional[str] = Field(None, min_length=1, max_length=128)


class ItemIn(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class CartUpdateIn(ApiModel):
    status: Optional[CartStatus] = None
    product_id: Optional[int] = Field(None, gt=0)
    quantity: Optional[int] = Field(None, gt=0)


class MergeCartIn(ApiModel):
    guest_cart_id: int = Field(..., gt=0)


class CartItemOut(ApiModel):
    id: int
    product_id: int
    quantity: int
    added_at: Optional[datetime] = None
    product_name: str
    product_price: Decimal
    image_url: Optional[str] = None
    line_total: Decimal


class CartOut(ApiModel):
    id: int
    user_id: Optional[int] = None
    session_id: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[CartItemOut]
    total: Decimal


# orders
class OrderItemIn(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    price_at_time: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class OrderCreate(ApiModel):
    user_id: Optional[int] = Field(None, gt=0)
    items: List[OrderItemIn] = Field(..., min_length=1)
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None


class OrderUpdate(ApiModel):
    status: Optional[OrderStatus] = None
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None


class OrderItemUpdate(ApiModel):
    quantity: int = Field(..., gt=0)


class OrderItemOut(ApiModel):
    id: int
    order_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price_at_time: Decimal
    line_total: Decimal


class OrderOut(ApiModel):
    id: int
    user_id: int
    status: str
    total_amount: Decimal
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut]


# checkout
class CheckoutItemIn(ApiModel):
    stripe_price_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0)


class CheckoutIn(ApiModel):
    items: List[CheckoutItemIn] = Field(default_factory=list)


class CheckoutSessionOut(ApiModel):
    session_id: str
    url: Optional[str] = None


class PaymentItemIn(ApiModel):
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(1, gt=0)


class PaymentIntentIn(ApiModel):
    items: List[PaymentItemIn] = Field(default_factory=list)


class PaymentIntentOut(ApiModel):
    client_secret: str
