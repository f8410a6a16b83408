"""Item aggregate: the stock-bearing view of a catalogue title.

Authoring of titles, authors and publishers lives elsewhere. The bookshop
only reads price and age restriction, and draws stock down at confirmation.
"""

from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String

from bookshop.domain import bookshop


@bookshop.event(part_of="Item")
class StockDecreased:
    """Units of an item were taken from stock by a confirmed order."""

    __version__ = 1

    item_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@bookshop.aggregate
class Item:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    amount_in_stock = Integer(default=0, min_value=0)
    minimum_age = Integer(default=0, min_value=0)
    average_rating = Float(default=0.0, min_value=0.0, max_value=5.0)

    def decrease_stock(self, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.amount_in_stock:
            raise ValidationError(
                {
                    "amount_in_stock": [
                        f"Not enough stock for item {self.name}. "
                        f"Available: {self.amount_in_stock}, Requested: {quantity}"
                    ]
                }
            )

        self.amount_in_stock -= quantity
        self.raise_(
            StockDecreased(
                item_id=str(self.id),
                quantity=quantity,
                remaining=self.amount_in_stock,
            )
        )
