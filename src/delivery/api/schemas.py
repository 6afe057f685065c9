"""Pydantic request/response schemas for the delivery API.

These are external contracts, separate from the internal Protean commands.
JSON bodies use camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from delivery.config import MAX_CART_ITEM_QUANTITY


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DeliveryAddressSchema(CamelModel):
    label: str | None = None
    full_address: str = Field(min_length=1)
    building: str | None = None
    room: str | None = None
    note: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"productId": "prod-001", "quantity": 2}]},
    )


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(ge=1, le=MAX_CART_ITEM_QUANTITY)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(CamelModel):
    shop_id: str
    delivery_address: DeliveryAddressSchema
    payment_method: Literal["COD", "ZALOPAY", "MOMO", "SEPAY"] = "COD"
    voucher_code: str | None = None
    delivery_note: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "shopId": "shop-001",
                    "deliveryAddress": {
                        "label": "Dorm",
                        "fullAddress": "KTX Khu B, Linh Trung, Thu Duc",
                        "building": "B3",
                        "room": "402",
                    },
                    "paymentMethod": "COD",
                    "voucherCode": None,
                }
            ]
        },
    )


class CancelOrderRequest(CamelModel):
    reason: str | None = Field(default=None, max_length=500)


class ProductReviewRequest(CamelModel):
    product_id: str
    rating: int
    comment: str | None = None


class SubmitReviewRequest(CamelModel):
    rating: int
    comment: str | None = None
    product_reviews: list[ProductReviewRequest] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Cart Response Schemas
# ---------------------------------------------------------------------------
class CartItemSchema(CamelModel):
    product_id: str
    shop_id: str
    product_name: str | None = None
    product_image: str | None = None
    quantity: int
    price: float
    subtotal: float
    added_at: datetime | None = None
    updated_at: datetime | None = None


class CartGroupSchema(CamelModel):
    shop_id: str
    shop_name: str | None = None
    is_open: bool
    ship_fee: float
    items: list[CartItemSchema]
    subtotal: float
    last_activity_at: datetime | None = None


class CartSchema(CamelModel):
    groups: list[CartGroupSchema]
    total_items: int
    total_amount: float


class ClearCartByShopResponse(CamelModel):
    removed_count: int
    groups: list[CartGroupSchema]


class ClearCartResponse(CamelModel):
    removed_count: int


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class OrderItemSchema(CamelModel):
    product_id: str
    product_name: str
    product_image: str | None = None
    quantity: int
    price: float
    subtotal: float


class OrderDetailSchema(CamelModel):
    id: str
    order_number: str
    customer_id: str
    shop_id: str
    shop_name: str | None = None
    # Always serialized; null until a shipper accepts the order
    shipper_id: str | None
    items: list[OrderItemSchema]
    subtotal: float
    ship_fee: float
    discount: float
    total: float
    voucher_code: str | None = None
    status: str
    payment_status: str
    payment_method: str
    delivery_address: DeliveryAddressSchema | None = None
    delivery_note: str | None = None
    cancel_reason: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    confirmed_at: datetime | None = None
    preparing_at: datetime | None = None
    ready_at: datetime | None = None
    shipping_at: datetime | None = None
    delivered_at: datetime | None = None
    review_id: str | None = None
    reviewed_at: datetime | None = None
    paid_out: bool = False
    paid_out_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListItemSchema(CamelModel):
    id: str
    order_number: str
    customer_id: str
    shop_id: str
    shop_name: str | None = None
    shipper_id: str | None
    status: str
    payment_status: str
    payment_method: str
    total: float
    item_count: int
    items_preview: list[OrderItemSchema]
    created_at: datetime | None = None


class OrderPageSchema(CamelModel):
    orders: list[OrderListItemSchema]
    page: int
    limit: int
    total: int
    total_pages: int


# ---------------------------------------------------------------------------
# Review Response Schemas
# ---------------------------------------------------------------------------
class ProductRatingSchema(CamelModel):
    product_id: str
    product_name: str | None = None
    rating: int
    comment: str | None = None


class ReviewSchema(CamelModel):
    id: str
    order_id: str
    customer_id: str
    shop_id: str
    rating: int
    comment: str | None = None
    product_ratings: list[ProductRatingSchema]
    created_at: datetime | None = None
