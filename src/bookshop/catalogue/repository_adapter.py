"""Catalogue adapter backed by the domain's own ``Item`` repository."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bookshop.catalogue.item import Item
from bookshop.catalogue.port import Catalogue


class RepositoryCatalogue(Catalogue):
    def _repo(self):
        return current_domain.repository_for(Item)

    def _get(self, item_id: str) -> Item:
        return self._repo().get(item_id)

    def item_exists(self, item_id: str) -> bool:
        try:
            self._get(item_id)
        except ObjectNotFoundError:
            return False
        return True

    def get_price(self, item_id: str) -> float:
        return self._get(item_id).price

    def get_stock(self, item_id: str) -> int:
        return self._get(item_id).amount_in_stock

    def decrease_stock(self, item_id: str, quantity: int) -> None:
        item = self._get(item_id)
        item.decrease_stock(quantity)
        self._repo().add(item)

    def get_minimum_age(self, item_id: str) -> int:
        return self._get(item_id).minimum_age

    def describe(self, item_id: str) -> dict:
        item = self._get(item_id)
        return {
            "item_id": str(item.id),
            "name": item.name,
            "price": item.price,
            "average_rating": item.average_rating,
            "amount_in_stock": item.amount_in_stock,
            "minimum_age": item.minimum_age,
        }
