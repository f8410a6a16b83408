"""Pydantic request/response schemas for the bookshop API.

These are external contracts, kept separate from the Protean commands they
translate into.
"""

from pydantic import BaseModel, Field

from bookshop.order.order import OrderStatus
from bookshop.payment.payment import PaymentType


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str
    item_id: str
    quantity: int = Field(ge=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "item_id": "item-005",
                    "quantity": 3,
                }
            ]
        }
    }


class AddToCartRequest(BaseModel):
    item_id: str
    quantity: int = Field(ge=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class ConfirmOrderRequest(BaseModel):
    payment_type: PaymentType


class ChangeStatusRequest(BaseModel):
    status: OrderStatus


class RemoveExpiredCartsRequest(BaseModel):
    retention_days: int | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ReassignmentResponse(BaseModel):
    moved: int


class RemovedCartsResponse(BaseModel):
    removed: int


class ItemResponse(BaseModel):
    item_id: str
    name: str
    price: float
    average_rating: float
    amount_in_stock: int
    minimum_age: int


class LineItemResponse(BaseModel):
    item: ItemResponse
    quantity: int


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str
    total_price: float
    created_at: str | None = None
    items: list[LineItemResponse]


class OrderSummaryResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    total_price: float
    last_updated_at: str


class OrderDetailResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    total_price: float
    created_at: str | None = None
    confirmed_at: str | None = None
    preparation_started_at: str | None = None
    shipped_at: str | None = None
    delivered_at: str | None = None
    cancelled_at: str | None = None
    items: list[LineItemResponse]
