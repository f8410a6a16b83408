"""Removal of carts left untouched past the retention window.

Carts never take stock, so deleting one has no side effect beyond the row
itself. ``remove_expired_carts`` lists the candidates, then discards each
one through its own command under the cart's lock. The cart is read again
there, so one checked out after the listing is left alone. Runs from the
background sweeper or on demand through the maintenance endpoint.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from bookshop import config
from bookshop.concurrency import dispatch, lock_keys, order_key
from bookshop.domain import bookshop
from bookshop.order.order import Order, as_utc

logger = structlog.get_logger(__name__)


@bookshop.command(part_of="Order")
class DiscardExpiredCart:
    """Delete one cart if it is still a cart created before ``cutoff``."""

    cart_id = Identifier(required=True)
    cutoff = DateTime(required=True)


@lock_keys.register(DiscardExpiredCart)
def _(command):
    return (order_key(command.cart_id),)


@bookshop.command_handler(part_of=Order)
class CartExpirationHandler:
    @handle(DiscardExpiredCart)
    def discard_expired_cart(self, command):
        repo = current_domain.repository_for(Order)
        cart = repo.cart_by_id(command.cart_id)
        if cart is None or as_utc(cart.created_at) >= as_utc(command.cutoff):
            return False

        logger.debug(
            "Removing expired cart",
            cart_id=str(cart.id),
            customer_id=str(cart.customer_id),
            created_at=str(cart.created_at),
        )
        repo.discard_cart(cart)
        return True


def remove_expired_carts(as_of: datetime | None = None, retention_days: int | None = None) -> int:
    """Delete carts created before ``as_of`` minus the retention window.

    ``as_of`` defaults to now and ``retention_days`` to CART_RETENTION_DAYS.
    Returns the number of carts removed.
    """
    if retention_days is not None and retention_days < 0:
        raise ValidationError({"retention_days": ["Retention cannot be negative"]})

    as_of = as_utc(as_of or datetime.now(UTC))
    retention = timedelta(days=retention_days) if retention_days is not None else config.cart_retention()
    cutoff = as_of - retention

    candidates = [
        str(cart.id)
        for cart in current_domain.repository_for(Order).carts_oldest_first()
        if as_utc(cart.created_at) < cutoff
    ]
    removed = sum(1 for cart_id in candidates if dispatch(DiscardExpiredCart(cart_id=cart_id, cutoff=cutoff)))

    logger.info("Expired carts removed", removed=removed, cutoff=cutoff.isoformat())
    return removed
