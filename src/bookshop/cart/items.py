"""Cart line items: commands and handler.

Every mutation is dispatched under the cart's lock and commits before the
lock is released. Quantities are validated against the stock on hand at the
moment of the change; nothing is reserved until confirmation.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from bookshop.cart.rules import load_cart, put_item, require_item
from bookshop.concurrency import lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.inventory.ledger import InventoryLedger
from bookshop.order.order import Order


@bookshop.command(part_of="Order")
class AddToCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@bookshop.command(part_of="Order")
class UpdateCartQuantity:
    """Set a line's quantity to an absolute value."""

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@bookshop.command(part_of="Order")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@lock_keys.register(AddToCart)
@lock_keys.register(UpdateCartQuantity)
@lock_keys.register(RemoveFromCart)
def _(command):
    return (order_key(command.cart_id),)


@bookshop.command_handler(part_of=Order)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = load_cart(command.cart_id)
        put_item(cart, command.item_id, command.quantity)
        current_domain.repository_for(Order).add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = load_cart(command.cart_id)
        require_item(command.item_id)
        _require_line(cart, command.item_id)
        InventoryLedger().check_available(command.item_id, command.quantity)

        cart.update_item_quantity(command.item_id, command.quantity)
        current_domain.repository_for(Order).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.cart_id)
        require_item(command.item_id)
        _require_line(cart, command.item_id)

        cart.remove_item(command.item_id)
        current_domain.repository_for(Order).add(cart)


def _require_line(cart: Order, item_id) -> None:
    if cart.line_for(item_id) is None:
        raise ObjectNotFoundError({"item": [f"Item {item_id} is not in cart {cart.id}"]})
