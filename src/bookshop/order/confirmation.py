"""Confirmation: take stock for every line and record the payment.

The command is dispatched under the order's lock and the lock of every item
it holds, and commits before the locks are released. Two buyers racing for
the last copy therefore see each other's decrement, and exactly one of them
wins. Every check happens before the first counter moves, so a failed
confirmation leaves the order Pending with stock untouched and no payment
behind.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from bookshop.catalogue import get_catalogue
from bookshop.concurrency import item_key, lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.inventory.ledger import InventoryLedger
from bookshop.order.order import Order, OrderStatus
from bookshop.payment.payment import Payment, PaymentType

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)
    payment_type = String(required=True, choices=PaymentType)


@lock_keys.register(ConfirmOrder)
def _(command):
    order = current_domain.repository_for(Order).get(command.order_id)
    return (order_key(command.order_id), *(item_key(line.item_id) for line in order.items))


@bookshop.command_handler(part_of=Order)
class ConfirmOrderHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.status != OrderStatus.PENDING.value:
            raise ValidationError({"status": [f"Only pending orders can be confirmed; this order is {order.status}"]})

        catalogue = get_catalogue()
        amount = order.total_price(catalogue.get_price)
        InventoryLedger(catalogue).decrement_all((str(line.item_id), line.quantity) for line in order.items)

        order.confirm(command.payment_type, amount)
        payment = Payment.record(
            order_id=order.id,
            amount=amount,
            payment_type=command.payment_type,
            paid_at=order.confirmed_at,
        )
        repo.add(order)
        current_domain.repository_for(Payment).add(payment)

        logger.info(
            "Order confirmed",
            order_id=str(order.id),
            payment_id=str(payment.id),
            amount=amount,
            payment_type=command.payment_type,
        )
        return str(payment.id)
