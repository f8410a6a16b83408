"""Read side: plain-dict views of orders and carts for the API layer.

Totals are computed at read time from current catalogue prices. Line items
are resolved through the catalogue, so names, prices and ratings always
reflect the catalogue's current state.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bookshop.catalogue import get_catalogue
from bookshop.identity import get_directory
from bookshop.order.order import Order, OrderStatus

# Orders that have not been placed yet are left out of a customer's history
_UNPLACED = {OrderStatus.CART.value, OrderStatus.PENDING.value}


def _iso(value):
    return value.isoformat() if value is not None else None


def _lines(order: Order) -> list[dict]:
    catalogue = get_catalogue()
    return [{"item": catalogue.describe(str(line.item_id)), "quantity": line.quantity} for line in order.items]


def _total(order: Order) -> float:
    return order.total_price(get_catalogue().get_price)


def _newest_first(orders: list[Order]) -> list[Order]:
    return sorted(orders, key=lambda order: order.last_updated_at, reverse=True)


def order_summary(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "customer_id": str(order.customer_id),
        "status": order.status,
        "total_price": _total(order),
        "last_updated_at": _iso(order.last_updated_at),
    }


def order_detail(order_id) -> dict:
    order = current_domain.repository_for(Order).get(order_id)
    return {
        "order_id": str(order.id),
        "customer_id": str(order.customer_id),
        "status": order.status,
        "total_price": _total(order),
        "created_at": _iso(order.created_at),
        "confirmed_at": _iso(order.confirmed_at),
        "preparation_started_at": _iso(order.preparation_started_at),
        "shipped_at": _iso(order.shipped_at),
        "delivered_at": _iso(order.delivered_at),
        "cancelled_at": _iso(order.cancelled_at),
        "items": _lines(order),
    }


def cart_for_customer(customer_id) -> dict:
    if not get_directory().customer_exists(customer_id):
        raise ObjectNotFoundError({"customer": [f"Customer {customer_id} not found"]})

    cart = current_domain.repository_for(Order).cart_for_customer(customer_id)
    if cart is None:
        raise ObjectNotFoundError({"cart": [f"Customer {customer_id} has no open cart"]})

    return {
        "cart_id": str(cart.id),
        "customer_id": str(cart.customer_id),
        "total_price": _total(cart),
        "created_at": _iso(cart.created_at),
        "items": _lines(cart),
    }


def orders_with_status(status) -> list[dict]:
    orders = current_domain.repository_for(Order).with_status(status)
    return [order_summary(order) for order in _newest_first(orders)]


def customer_history(customer_id) -> list[dict]:
    """Placed orders of a customer, most recently updated first."""
    if not get_directory().customer_exists(customer_id):
        raise ObjectNotFoundError({"customer": [f"Customer {customer_id} not found"]})

    orders = current_domain.repository_for(Order).for_customer(customer_id)
    placed = [order for order in orders if order.status not in _UNPLACED]
    return [order_summary(order) for order in _newest_first(placed)]


def all_orders() -> list[dict]:
    orders = current_domain.repository_for(Order).every_order()
    return [order_summary(order) for order in _newest_first(orders)]


def items_in_order(order_id) -> list[dict]:
    order = current_domain.repository_for(Order).get(order_id)
    catalogue = get_catalogue()
    return [catalogue.describe(str(line.item_id)) for line in order.items]
