"""FastAPI routes for the bookshop: carts, orders, customers, maintenance.

Thin adapters. Mutations translate a schema into a command and acknowledge
with ``StatusResponse``; reads return the dict views from
``bookshop.order.views``. Protean's ``ValidationError`` and
``ObjectNotFoundError`` surface as 400 and 404 through the exception
handlers registered on the application.
"""

from fastapi import APIRouter

from bookshop.api.schemas import (
    AddToCartRequest,
    CartIdResponse,
    CartResponse,
    ChangeStatusRequest,
    ConfirmOrderRequest,
    CreateCartRequest,
    ItemResponse,
    OrderDetailResponse,
    OrderSummaryResponse,
    ReassignmentResponse,
    RemovedCartsResponse,
    RemoveExpiredCartsRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from bookshop.cart.expiration import remove_expired_carts
from bookshop.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from bookshop.cart.management import CreateCart
from bookshop.concurrency import dispatch
from bookshop.order import views
from bookshop.order.cancellation import CancelOrder
from bookshop.order.checkout import CheckoutOrder
from bookshop.order.confirmation import ConfirmOrder
from bookshop.order.fulfillment import ChangeOrderStatus
from bookshop.order.order import OrderStatus
from bookshop.order.reassignment import ReassignCustomerOrders

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(
        customer_id=body.customer_id,
        item_id=body.item_id,
        quantity=body.quantity,
    )
    result = dispatch(command)
    return CartIdResponse(cart_id=result)


@cart_router.get("/customer/{customer_id}", response_model=CartResponse)
async def get_customer_cart(customer_id: str) -> CartResponse:
    return CartResponse(**views.cart_for_customer(customer_id))


@cart_router.post("/{cart_id}/items", response_model=StatusResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> StatusResponse:
    command = AddToCart(cart_id=cart_id, item_id=body.item_id, quantity=body.quantity)
    dispatch(command)
    return StatusResponse()


@cart_router.put("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(cart_id: str, item_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(cart_id=cart_id, item_id=item_id, quantity=body.quantity)
    dispatch(command)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    dispatch(RemoveFromCart(cart_id=cart_id, item_id=item_id))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(status: OrderStatus | None = None) -> list[OrderSummaryResponse]:
    summaries = views.orders_with_status(status) if status is not None else views.all_orders()
    return [OrderSummaryResponse(**summary) for summary in summaries]


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str) -> OrderDetailResponse:
    return OrderDetailResponse(**views.order_detail(order_id))


@order_router.get("/{order_id}/items", response_model=list[ItemResponse])
async def get_order_items(order_id: str) -> list[ItemResponse]:
    return [ItemResponse(**item) for item in views.items_in_order(order_id)]


@order_router.post("/{order_id}/checkout", response_model=StatusResponse)
async def checkout_order(order_id: str) -> StatusResponse:
    dispatch(CheckoutOrder(order_id=order_id))
    return StatusResponse()


@order_router.post("/{order_id}/confirm", response_model=StatusResponse)
async def confirm_order(order_id: str, body: ConfirmOrderRequest) -> StatusResponse:
    command = ConfirmOrder(order_id=order_id, payment_type=body.payment_type.value)
    dispatch(command)
    return StatusResponse()


@order_router.post("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str) -> StatusResponse:
    dispatch(CancelOrder(order_id=order_id))
    return StatusResponse()


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def change_order_status(order_id: str, body: ChangeStatusRequest) -> StatusResponse:
    command = ChangeOrderStatus(order_id=order_id, status=body.status.value)
    dispatch(command)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.get("/{customer_id}/orders", response_model=list[OrderSummaryResponse])
async def get_customer_history(customer_id: str) -> list[OrderSummaryResponse]:
    return [OrderSummaryResponse(**summary) for summary in views.customer_history(customer_id)]


@customer_router.post("/{customer_id}/orders/reassign", response_model=ReassignmentResponse)
async def reassign_customer_orders(customer_id: str) -> ReassignmentResponse:
    moved = dispatch(ReassignCustomerOrders(customer_id=customer_id))
    return ReassignmentResponse(moved=moved)


# ---------------------------------------------------------------------------
# Maintenance Router
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@maintenance_router.post("/expired-carts", response_model=RemovedCartsResponse)
async def run_cart_expiration(body: RemoveExpiredCartsRequest | None = None) -> RemovedCartsResponse:
    removed = remove_expired_carts(retention_days=body.retention_days if body else None)
    return RemovedCartsResponse(removed=removed)
