"""Order aggregate: one record from open cart to delivery.

An order is born in ``Cart`` status, where its line items may change
freely, and leaves it only through checkout. Every later move follows a
single forward edge:

    Cart -> Pending -> Confirmed -> Preparation -> Shipped -> Delivered
                       Confirmed -> Cancelled

``Delivered`` and ``Cancelled`` are terminal. Stock and payment side effects
of confirmation belong to the command handler; the aggregate stamps the
timestamps and raises the events.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from bookshop.domain import bookshop
from bookshop.order.events import (
    CartCreated,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
    OrderCancelled,
    OrderCheckedOut,
    OrderConfirmed,
    OrderDelivered,
    OrderPreparationStarted,
    OrderReassigned,
    OrderShipped,
)


class OrderStatus(Enum):
    CART = "Cart"
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PREPARATION = "Preparation"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class Transition:
    target: OrderStatus
    stamp: str | None  # timestamp field set on entry, if any
    trigger: str  # the operation that fires this edge


# Each non-terminal status has exactly one forward edge
_FORWARD = {
    OrderStatus.CART: Transition(OrderStatus.PENDING, None, "checkout"),
    OrderStatus.PENDING: Transition(OrderStatus.CONFIRMED, "confirmed_at", "confirm"),
    OrderStatus.CONFIRMED: Transition(OrderStatus.PREPARATION, "preparation_started_at", "change_status"),
    OrderStatus.PREPARATION: Transition(OrderStatus.SHIPPED, "shipped_at", "change_status"),
    OrderStatus.SHIPPED: Transition(OrderStatus.DELIVERED, "delivered_at", "change_status"),
}

_CANCELLATION = {
    OrderStatus.CONFIRMED: Transition(OrderStatus.CANCELLED, "cancelled_at", "cancel"),
}

_TERMINAL = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

_FULFILLMENT_EVENTS = {
    OrderStatus.PREPARATION: OrderPreparationStarted,
    OrderStatus.SHIPPED: OrderShipped,
    OrderStatus.DELIVERED: OrderDelivered,
}

_LIFECYCLE_STAMPS = (
    "created_at",
    "confirmed_at",
    "preparation_started_at",
    "shipped_at",
    "delivered_at",
    "cancelled_at",
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


@bookshop.entity(part_of="Order")
class LineItem:
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@bookshop.aggregate
class Order:
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.CART.value)
    items = HasMany(LineItem)
    created_at = DateTime(default=_utcnow)
    confirmed_at = DateTime()
    preparation_started_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def an_item_appears_once_per_order(self):
        item_ids = [str(line.item_id) for line in self.items]
        if len(item_ids) != len(set(item_ids)):
            raise ValidationError({"items": ["An item can appear only once in an order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open_cart(cls, customer_id):
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            status=OrderStatus.CART.value,
            created_at=now,
        )
        order.raise_(
            CartCreated(
                order_id=str(order.id),
                customer_id=str(customer_id),
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def is_cart(self) -> bool:
        return self.status == OrderStatus.CART.value

    @property
    def last_updated_at(self) -> datetime:
        """Latest lifecycle timestamp, falling back to creation time."""
        stamps = [as_utc(getattr(self, name)) for name in _LIFECYCLE_STAMPS if getattr(self, name) is not None]
        return max(stamps)

    def total_price(self, price_of: Callable[[str], float]) -> float:
        """Sum of quantity times the item's current price."""
        return sum(line.quantity * price_of(str(line.item_id)) for line in self.items)

    def line_for(self, item_id):
        return next((line for line in self.items if str(line.item_id) == str(item_id)), None)

    # -------------------------------------------------------------------
    # Line items (Cart status only)
    # -------------------------------------------------------------------
    def _assert_cart(self):
        if not self.is_cart:
            raise ValidationError({"status": [f"Line items cannot change once the order is {self.status}"]})

    def _line_or_fail(self, item_id):
        line = self.line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": [f"Item {item_id} is not in the cart"]})
        return line

    def add_item(self, item_id, quantity):
        """Put ``quantity`` units in the cart, summing with an existing line."""
        self._assert_cart()
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        line = self.line_for(item_id)
        if line is not None:
            line.quantity += quantity
        else:
            line = LineItem(item_id=item_id, quantity=quantity)
            self.add_items(line)

        self.raise_(
            CartItemAdded(
                order_id=str(self.id),
                item_id=str(item_id),
                quantity_added=quantity,
                quantity=line.quantity,
            )
        )

    def update_item_quantity(self, item_id, quantity):
        """Set the line's quantity outright."""
        self._assert_cart()
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be positive; remove the item instead"]})

        line = self._line_or_fail(item_id)
        previous_quantity = line.quantity
        line.quantity = quantity

        self.raise_(
            CartItemQuantityUpdated(
                order_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        self._assert_cart()
        line = self._line_or_fail(item_id)
        self.remove_items(line)

        self.raise_(CartItemRemoved(order_id=str(self.id), item_id=str(item_id)))

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _forward_edge(self, trigger: str) -> Transition:
        current = OrderStatus(self.status)
        edge = _FORWARD.get(current)
        if edge is None or edge.trigger != trigger:
            raise ValidationError({"status": [f"Cannot {trigger.replace('_', ' ')} an order that is {current.value}"]})
        return edge

    def _enter(self, edge: Transition) -> datetime:
        """Move to ``edge.target`` and stamp its timestamp.

        The stamp never precedes the previous lifecycle timestamp, even if
        the wall clock stepped backwards in between.
        """
        now = max(datetime.now(UTC), self.last_updated_at)
        self.status = edge.target.value
        if edge.stamp:
            setattr(self, edge.stamp, now)
        return now

    def checkout(self):
        edge = self._forward_edge("checkout")
        now = self._enter(edge)
        self.raise_(
            OrderCheckedOut(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                checked_out_at=now,
            )
        )

    def confirm(self, payment_type: str, amount: float):
        """Mark the order paid. The caller has already taken the stock."""
        edge = self._forward_edge("confirm")
        now = self._enter(edge)
        self.raise_(
            OrderConfirmed(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                payment_type=payment_type,
                amount=amount,
                confirmed_at=now,
            )
        )

    def cancel(self):
        """Cancel a confirmed order. Stock already taken is not returned."""
        current = OrderStatus(self.status)
        edge = _CANCELLATION.get(current)
        if edge is None:
            raise ValidationError({"status": [f"Only confirmed orders can be cancelled; this order is {current.value}"]})

        now = self._enter(edge)
        self.raise_(OrderCancelled(order_id=str(self.id), cancelled_at=now))

    def change_status(self, target):
        """Advance along the fulfillment edge to ``target``.

        Only the single next status is accepted. The Cart and Pending edges
        carry side effects of their own and are reached through checkout and
        confirmation instead.
        """
        current = OrderStatus(self.status)
        target = OrderStatus(target)

        if current in _TERMINAL:
            raise ValidationError(
                {"status": [f"Order is {current.value}; no further status change is possible"]}
            )

        edge = _FORWARD[current]
        if target != edge.target:
            raise ValidationError(
                {
                    "status": [
                        f"Cannot change status from {current.value} to {target.value}; "
                        f"the only legal next status is {edge.target.value}"
                    ]
                }
            )
        if edge.trigger != "change_status":
            raise ValidationError(
                {"status": [f"{current.value} orders move to {edge.target.value} only through {edge.trigger}"]}
            )

        now = self._enter(edge)
        self.raise_(_FULFILLMENT_EVENTS[target](order_id=str(self.id), **{edge.stamp: now}))

    # -------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------
    def reassign_to(self, customer_id):
        if self.is_cart:
            raise ValidationError({"status": ["Carts are removed with their owner, not reassigned"]})

        previous_customer_id = str(self.customer_id)
        self.customer_id = customer_id
        self.raise_(
            OrderReassigned(
                order_id=str(self.id),
                previous_customer_id=previous_customer_id,
                customer_id=str(customer_id),
            )
        )
