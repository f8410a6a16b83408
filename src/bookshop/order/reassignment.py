"""Hand a departing customer's order history to the deleted-customer placeholder.

The customer's open cart, if any, is deleted outright. Every order past the
cart stage is kept and re-pointed at the placeholder, so read paths never
meet an order without an owner.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from bookshop.concurrency import customer_key, lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.identity import get_directory
from bookshop.order.order import Order

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class ReassignCustomerOrders:
    customer_id = Identifier(required=True)


@lock_keys.register(ReassignCustomerOrders)
def _(command):
    """The customer, so no new cart appears, and each of their orders."""
    if get_directory().is_deleted_customer(command.customer_id):
        return (customer_key(command.customer_id),)

    orders = current_domain.repository_for(Order).for_customer(command.customer_id)
    return (customer_key(command.customer_id), *(order_key(order.id) for order in orders))


@bookshop.command_handler(part_of=Order)
class ReassignmentHandler:
    @handle(ReassignCustomerOrders)
    def reassign(self, command):
        directory = get_directory()
        if directory.is_deleted_customer(command.customer_id):
            raise ValidationError({"customer_id": ["Orders of the deleted-customer placeholder cannot be reassigned"]})

        placeholder_id = directory.get_deleted_customer()
        repo = current_domain.repository_for(Order)

        cart = repo.cart_for_customer(command.customer_id)
        if cart is not None:
            repo.discard_cart(cart)

        moved = 0
        for order in repo.for_customer(command.customer_id):
            if order.is_cart:
                continue
            order.reassign_to(placeholder_id)
            repo.add(order)
            moved += 1

        logger.info(
            "Customer orders reassigned",
            customer_id=str(command.customer_id),
            moved=moved,
            cart_deleted=cart is not None,
        )
        return moved
