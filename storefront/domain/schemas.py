# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.enums import CartKind


class ApiModel(BaseModel):
    """Bazowy model API: pola snake_case w Pythonie, camelCase w JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(ApiModel):
    message: str


# ---------------------------------------------------------------- customers

class CustomerSignup(ApiModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: str = Field(..., min_length=1, max_length=100)


class CustomerOut(ApiModel):
    id: int
    email: str
    username: str
    active: bool
    created_at: datetime


class TokenOut(ApiModel):
    customer_id: int
    token: str


# ---------------------------------------------------------------- catalog

class ProductOut(ApiModel):
    id: int
    name: str
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    sku: Optional[str] = None
    price: Decimal
    old_price: Decimal = Decimal("0")
    stock_quantity: int
    published: bool
    picture_id: int = 0
    seo_filename: Optional[str] = None
    mime_type: Optional[str] = None


class ProductFilterOut(ApiModel):
    products: List[ProductOut]
    total: int


class RecentlyViewedOut(ApiModel):
    id: int
    name: str
    short_description: Optional[str] = None


class CategoryChildOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    picture_id: int = 0


class CategoryOut(CategoryChildOut):
    children: List[CategoryChildOut] = []


class CategoryImageOut(CategoryChildOut):
    image_url: Optional[str] = None


class AttributeValueOut(ApiModel):
    id: int
    name: str
    price_adjustment: Decimal
    is_pre_selected: bool


class ProductAttributeOut(ApiModel):
    attribute_id: int
    attribute_name: str
    values: List[AttributeValueOut]


class ReviewIn(ApiModel):
    product_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    title: Optional[str] = Field(None, max_length=200)
    review_text: Optional[str] = None
    rating: int


class ReviewOut(ApiModel):
    id: int
    product: Optional[str] = None
    customer: Optional[str] = None
    title: Optional[str] = None
    review_text: Optional[str] = None
    rating: int
    is_approved: bool
    created_at: datetime


class RatingOut(ApiModel):
    average_rating: float
    total_reviews: int


# ---------------------------------------------------------------- cart / wishlist

class CartItemIn(ApiModel):
    """Dodanie do koszyka: quantity to przyrost, nie wartosc bezwzgledna."""

    customer_id: int = Field(..., gt=0)
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class WishlistItemIn(ApiModel):
    customer_id: int = Field(..., gt=0)
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)


class QuantityDeltaIn(ApiModel):
    delta: int


class CartItemOut(ApiModel):
    item_id: int
    product_id: int
    name: str
    price: Decimal
    quantity: int
    created_at: datetime


class WishlistItemOut(ApiModel):
    id: int
    product_id: int
    name: str
    short_description: Optional[str] = None
    price: Decimal
    quantity: int
    created_at: datetime
    image_url: Optional[str] = None


class ItemsRemovedOut(ApiModel):
    message: str
    customer_id: int
    items_removed: int


class WishlistRemovedOut(ApiModel):
    message: str
    customer_id: int
    item_id: Optional[int] = None
    product_id: Optional[int] = None


class SummaryOut(ApiModel):
    kind: CartKind
    item_count: int
    total_quantity: int
    subtotal: Decimal


class GuestEntryIn(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class MergeIn(ApiModel):
    customer_id: int = Field(..., gt=0)
    kind: CartKind = CartKind.CART
    entries: List[GuestEntryIn]


class MergeFailureOut(ApiModel):
    product_id: int
    error: str
    message: str


class MergeOut(ApiModel):
    migrated: List[int]
    skipped: List[int]
    failed: List[MergeFailureOut]


# ---------------------------------------------------------------- orders

class AddressIn(ApiModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None
    country_id: Optional[int] = None
    state_province_id: Optional[int] = None
    city: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    zip_postal_code: Optional[str] = None
    phone_number: Optional[str] = None


class AddressOut(ApiModel):
    success: bool = True
    address_id: int


class OrderCreate(ApiModel):
    customer_id: int = Field(..., gt=0)
    billing_address_id: int = Field(..., gt=0)
    shipping_address_id: int = Field(..., gt=0)


class OrderPlacedOut(ApiModel):
    message: str
    order_id: int
    order_guid: str
    total_amount: Decimal


class OrderLineOut(ApiModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderOut(ApiModel):
    id: int
    order_guid: str
    custom_order_number: str
    customer_id: int
    billing_address_id: int
    shipping_address_id: int
    status: str
    total: Decimal
    created_at: datetime
    lines: List[OrderLineOut]
