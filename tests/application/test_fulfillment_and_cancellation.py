"""Application tests for status changes and cancellation."""

import pytest
from bookshop.catalogue.item import Item
from bookshop.concurrency import dispatch
from bookshop.order.cancellation import CancelOrder
from bookshop.order.confirmation import ConfirmOrder
from bookshop.order.fulfillment import ChangeOrderStatus
from bookshop.order.order import Order, OrderStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _change(order_id, status):
    dispatch(ChangeOrderStatus(order_id=order_id, status=status))


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


@pytest.fixture()
def confirmed_order(make_customer, make_item, pending_order):
    def _confirmed(stock=10, quantity=2):
        item_id = make_item(stock=stock)
        order_id = pending_order(make_customer(), item_id, quantity)
        dispatch(ConfirmOrder(order_id=order_id, payment_type="Card"))
        return order_id, item_id

    return _confirmed


class TestChangeStatus:
    def test_walks_the_fulfillment_path(self, confirmed_order):
        order_id, _ = confirmed_order()

        _change(order_id, "Preparation")
        _change(order_id, "Shipped")
        _change(order_id, "Delivered")

        order = _order(order_id)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.preparation_started_at is not None
        assert order.shipped_at >= order.preparation_started_at
        assert order.delivered_at >= order.shipped_at

    def test_preparation_cannot_skip_to_delivered(self, confirmed_order):
        order_id, _ = confirmed_order()
        _change(order_id, "Preparation")

        with pytest.raises(ValidationError) as exc:
            _change(order_id, "Delivered")

        assert "Shipped" in str(exc.value.messages)
        assert _order(order_id).status == OrderStatus.PREPARATION.value
        assert _order(order_id).delivered_at is None

    def test_pending_cannot_be_confirmed_by_status_change(self, make_customer, make_item, pending_order):
        order_id = pending_order(make_customer(), make_item())
        with pytest.raises(ValidationError):
            _change(order_id, "Confirmed")
        assert _order(order_id).status == OrderStatus.PENDING.value

    def test_unknown_status_is_rejected_by_command(self):
        with pytest.raises(ValidationError):
            ChangeOrderStatus(order_id="order-001", status="Lost")

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _change("order-missing", "Preparation")


class TestCancellation:
    def test_confirmed_order_is_cancelled(self, confirmed_order):
        order_id, _ = confirmed_order()

        dispatch(CancelOrder(order_id=order_id))

        order = _order(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_at >= order.confirmed_at

    def test_cancellation_keeps_stock_deducted(self, confirmed_order):
        order_id, item_id = confirmed_order(stock=10, quantity=4)

        dispatch(CancelOrder(order_id=order_id))

        assert current_domain.repository_for(Item).get(item_id).amount_in_stock == 6

    def test_pending_order_cannot_be_cancelled(self, make_customer, make_item, pending_order):
        order_id = pending_order(make_customer(), make_item())
        with pytest.raises(ValidationError):
            dispatch(CancelOrder(order_id=order_id))

    def test_shipped_order_cannot_be_cancelled(self, confirmed_order):
        order_id, _ = confirmed_order()
        _change(order_id, "Preparation")
        _change(order_id, "Shipped")

        with pytest.raises(ValidationError):
            dispatch(CancelOrder(order_id=order_id))
        assert _order(order_id).cancelled_at is None

    def test_cancelled_order_is_final(self, confirmed_order):
        order_id, _ = confirmed_order()
        dispatch(CancelOrder(order_id=order_id))

        with pytest.raises(ValidationError):
            _change(order_id, "Preparation")
