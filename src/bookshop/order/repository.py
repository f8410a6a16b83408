"""Repository for the Order aggregate."""

from protean.exceptions import ValidationError

from bookshop.domain import bookshop
from bookshop.order.order import Order, OrderStatus

_PAGE_SIZE = 100


@bookshop.repository(part_of=Order)
class OrderRepository:
    """Order queries beyond get/add.

    Carts are the only orders that are ever deleted; ``discard_cart`` refuses
    anything that has been checked out.
    """

    def _collect(self, **filters) -> list[Order]:
        """Every matching order, oldest first, read page by page."""
        found = []
        offset = 0
        while True:
            query = self._dao.query.filter(**filters) if filters else self._dao.query
            page = query.order_by("created_at").offset(offset).limit(_PAGE_SIZE).all().items
            found.extend(page)
            if len(page) < _PAGE_SIZE:
                return found
            offset += _PAGE_SIZE

    def cart_for_customer(self, customer_id) -> Order | None:
        carts = self._dao.query.filter(customer_id=str(customer_id), status=OrderStatus.CART.value).all().items
        return carts[0] if carts else None

    def cart_by_id(self, order_id) -> Order | None:
        """The order with ``order_id`` as stored now, provided it is still a cart."""
        carts = self._dao.query.filter(id=str(order_id), status=OrderStatus.CART.value).all().items
        return carts[0] if carts else None

    def carts_oldest_first(self) -> list[Order]:
        return self._collect(status=OrderStatus.CART.value)

    def with_status(self, status) -> list[Order]:
        return self._collect(status=OrderStatus(status).value)

    def for_customer(self, customer_id) -> list[Order]:
        return self._collect(customer_id=str(customer_id))

    def every_order(self) -> list[Order]:
        return self._collect()

    def discard_cart(self, order: Order) -> None:
        if not order.is_cart:
            raise ValidationError({"status": [f"Order {order.id} is {order.status} and cannot be deleted"]})
        self._dao.delete(order)
