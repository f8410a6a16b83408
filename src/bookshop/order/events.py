"""Domain events for the Order aggregate, cart phase included."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from bookshop.domain import bookshop


@bookshop.event(part_of="Order")
class CartCreated:
    """A customer opened a cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    created_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class CartItemAdded:
    """An item was put in the cart, or more units of one already there."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    quantity = Integer(required=True)


@bookshop.event(part_of="Order")
class CartItemQuantityUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@bookshop.event(part_of="Order")
class CartItemRemoved:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@bookshop.event(part_of="Order")
class OrderCheckedOut:
    """The cart was closed and now awaits payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    checked_out_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class OrderConfirmed:
    """Payment was recorded and stock was taken for every line."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_type = String(required=True)
    amount = Float(required=True)
    confirmed_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class OrderPreparationStarted:
    __version__ = 1

    order_id = Identifier(required=True)
    preparation_started_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    shipped_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class OrderCancelled:
    """A confirmed order was cancelled. Stock taken at confirmation stays taken."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@bookshop.event(part_of="Order")
class OrderReassigned:
    """The order changed hands, typically to the deleted-customer placeholder."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_customer_id = Identifier(required=True)
    customer_id = Identifier(required=True)
