"""Inventory ledger: the single gate for reading and taking stock.

Cart operations ask ``check_available`` right before they commit a quantity;
confirmation takes every line at once through ``decrement_all``. Nothing
else in the bookshop touches ``Item.amount_in_stock``.
"""

from collections.abc import Iterable

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from bookshop.catalogue import get_catalogue
from bookshop.catalogue.port import Catalogue
from bookshop.concurrency import item_key, locks

logger = structlog.get_logger(__name__)


def _insufficient(name: str, available: int, requested: int) -> ValidationError:
    return ValidationError(
        {"amount_in_stock": [f"Not enough stock for item {name}. Available: {available}, Requested: {requested}"]}
    )


class InventoryLedger:
    def __init__(self, catalogue: Catalogue | None = None) -> None:
        self._catalogue = catalogue

    @property
    def catalogue(self) -> Catalogue:
        return self._catalogue or get_catalogue()

    def get_stock(self, item_id: str) -> int:
        return self.catalogue.get_stock(item_id)

    def check_available(self, item_id: str, quantity: int) -> None:
        """Raise ``ValidationError`` if ``quantity`` units are not on hand right now.

        No units are held back; the same check runs again at confirmation.
        """
        available = self.get_stock(item_id)
        if quantity > available:
            raise _insufficient(self.catalogue.describe(item_id)["name"], available, quantity)

    def decrement(self, item_id: str, quantity: int) -> None:
        with locks.hold(item_key(item_id)):
            self.check_available(item_id, quantity)
            self.catalogue.decrease_stock(item_id, quantity)

    def decrement_all(self, lines: Iterable[tuple[str, int]]) -> None:
        """Take every ``(item_id, quantity)`` line, or none of them.

        Every line's item lock is held throughout. All lines are checked
        before the first decrement, so a shortfall on any line leaves every
        counter untouched. The error names the first short line in the order
        given.
        """
        lines = list(lines)
        with locks.hold(*(item_key(item_id) for item_id, _ in lines)):
            for item_id, quantity in lines:
                try:
                    self.check_available(item_id, quantity)
                except ObjectNotFoundError:
                    raise ValidationError({"item_id": [f"Item {item_id} is no longer available"]}) from None

            for item_id, quantity in lines:
                self.catalogue.decrease_stock(item_id, quantity)

        logger.info("Stock taken", lines=len(lines))
