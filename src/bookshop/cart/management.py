"""Cart creation: command and handler.

A customer holds at most one cart. Creation is dispatched under the
customer's lock, so the "no cart yet" check and the insert commit before a
second request for the same customer can look.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from bookshop.cart.rules import check_age, put_item, require_customer, require_item
from bookshop.concurrency import customer_key, lock_keys
from bookshop.domain import bookshop
from bookshop.identity import get_directory
from bookshop.inventory.ledger import InventoryLedger
from bookshop.order.order import Order

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class CreateCart:
    """Open a cart for a customer, starting with one item."""

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@lock_keys.register(CreateCart)
def _(command):
    return (customer_key(command.customer_id),)


@bookshop.command_handler(part_of=Order)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        if get_directory().is_deleted_customer(command.customer_id):
            raise ValidationError({"customer_id": ["The deleted-customer placeholder cannot shop"]})

        require_customer(command.customer_id)
        require_item(command.item_id)

        repo = current_domain.repository_for(Order)
        if repo.cart_for_customer(command.customer_id) is not None:
            raise ValidationError({"customer_id": ["Customer already has an open cart"]})

        ledger = InventoryLedger()
        ledger.check_available(command.item_id, command.quantity)
        check_age(command.customer_id, command.item_id)

        cart = Order.open_cart(command.customer_id)
        put_item(cart, command.item_id, command.quantity, ledger=ledger)
        repo.add(cart)

        logger.info("Cart created", cart_id=str(cart.id), customer_id=str(command.customer_id))
        return str(cart.id)
