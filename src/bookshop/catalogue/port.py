"""Catalogue port (abstract interface).

The narrow contract the order lifecycle needs from the catalogue. Adapters
may sit on the local ``Item`` repository or on a remote catalogue service.
"""

from abc import ABC, abstractmethod


class Catalogue(ABC):
    """Abstract catalogue interface."""

    @abstractmethod
    def item_exists(self, item_id: str) -> bool: ...

    @abstractmethod
    def get_price(self, item_id: str) -> float: ...

    @abstractmethod
    def get_stock(self, item_id: str) -> int: ...

    @abstractmethod
    def decrease_stock(self, item_id: str, quantity: int) -> None:
        """Take ``quantity`` units. Raises ``ValidationError`` if fewer are left."""
        ...

    @abstractmethod
    def get_minimum_age(self, item_id: str) -> int: ...

    @abstractmethod
    def describe(self, item_id: str) -> dict:
        """Display details for a line item: name, price, rating, stock, age limit."""
        ...
