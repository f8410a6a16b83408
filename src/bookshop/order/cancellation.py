"""Cancellation of confirmed orders.

Stock taken at confirmation is not put back. Whether cancelled stock should
return to the shelf is an open product decision; until it is made, the
counters stay as they are.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from bookshop.concurrency import lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.order.order import Order

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@lock_keys.register(CancelOrder)
def _(command):
    return (order_key(command.order_id),)


@bookshop.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel()
        repo.add(order)

        logger.info("Order cancelled", order_id=str(command.order_id))
