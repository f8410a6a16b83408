"""Fulfillment progress: Confirmed -> Preparation -> Shipped -> Delivered."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from bookshop.concurrency import lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class ChangeOrderStatus:
    """Move an order to its single legal next status."""

    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@lock_keys.register(ChangeOrderStatus)
def _(command):
    return (order_key(command.order_id),)


@bookshop.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        order.change_status(command.status)
        repo.add(order)

        logger.info("Order status changed", order_id=str(command.order_id), previous=previous, status=command.status)
