import pytest
from bookshop.cart.management import CreateCart
from bookshop.concurrency import dispatch
from bookshop.order.checkout import CheckoutOrder


@pytest.fixture()
def open_cart():
    """Create a cart through the command path and return its id."""

    def _open(customer_id, item_id, quantity=1):
        return dispatch(CreateCart(customer_id=customer_id, item_id=item_id, quantity=quantity))

    return _open


@pytest.fixture()
def pending_order(open_cart):
    """Create a cart and check it out, returning the order id."""

    def _pending(customer_id, item_id, quantity=1):
        order_id = open_cart(customer_id, item_id, quantity)
        dispatch(CheckoutOrder(order_id=order_id))
        return order_id

    return _pending
