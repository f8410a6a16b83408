"""Checkout: close the cart and wait for payment."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from bookshop.concurrency import lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.order.order import Order

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class CheckoutOrder:
    order_id = Identifier(required=True)


@lock_keys.register(CheckoutOrder)
def _(command):
    return (order_key(command.order_id),)


@bookshop.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(CheckoutOrder)
    def checkout(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.checkout()
        repo.add(order)

        logger.info("Order checked out", order_id=str(command.order_id))
