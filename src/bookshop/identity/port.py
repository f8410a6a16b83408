"""Customer directory port (abstract interface)."""

from abc import ABC, abstractmethod


class CustomerDirectory(ABC):
    """What the order lifecycle asks about customers."""

    @abstractmethod
    def customer_exists(self, customer_id: str) -> bool: ...

    @abstractmethod
    def get_age(self, customer_id: str) -> int:
        """Current age in whole years, computed at call time."""
        ...

    @abstractmethod
    def is_deleted_customer(self, customer_id: str) -> bool: ...

    @abstractmethod
    def get_deleted_customer(self) -> str:
        """Id of the sentinel that absorbs deleted accounts, creating it if needed."""
        ...
