"""Checks shared by every operation that changes what is in a cart.

Each check raises before anything is mutated: ``ObjectNotFoundError`` for a
missing cart, item or customer, ``ValidationError`` for a broken business
rule.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from bookshop.catalogue import get_catalogue
from bookshop.identity import get_directory
from bookshop.inventory.ledger import InventoryLedger
from bookshop.order.order import Order


def load_cart(cart_id) -> Order:
    """The order with ``cart_id``, provided it is still a cart."""
    try:
        order = current_domain.repository_for(Order).get(cart_id)
    except ObjectNotFoundError:
        order = None

    if order is None or not order.is_cart:
        raise ObjectNotFoundError({"cart": [f"Cart {cart_id} not found"]})
    return order


def require_item(item_id) -> None:
    if not get_catalogue().item_exists(item_id):
        raise ObjectNotFoundError({"item": [f"Item {item_id} not found"]})


def require_customer(customer_id) -> None:
    if not get_directory().customer_exists(customer_id):
        raise ObjectNotFoundError({"customer": [f"Customer {customer_id} not found"]})


def check_age(customer_id, item_id) -> None:
    """The customer must be at least the item's minimum age today."""
    minimum_age = get_catalogue().get_minimum_age(item_id)
    if minimum_age and get_directory().get_age(customer_id) < minimum_age:
        raise ValidationError({"age": [f"Customer is too young for this item (minimum age {minimum_age})"]})


def put_item(cart: Order, item_id, quantity: int, ledger: InventoryLedger | None = None) -> None:
    """Add ``quantity`` units of ``item_id``, validating the combined line against stock."""
    require_item(item_id)
    check_age(cart.customer_id, item_id)

    line = cart.line_for(item_id)
    combined = quantity + (line.quantity if line is not None else 0)
    (ledger or InventoryLedger()).check_available(item_id, combined)

    cart.add_item(item_id, quantity)
