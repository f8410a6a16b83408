"""Customer directory backed by the domain's ``Customer`` repository."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bookshop.identity.customer import DELETED_CUSTOMER_ID, Customer
from bookshop.identity.port import CustomerDirectory

logger = structlog.get_logger(__name__)


class RepositoryCustomerDirectory(CustomerDirectory):
    def _repo(self):
        return current_domain.repository_for(Customer)

    def customer_exists(self, customer_id: str) -> bool:
        try:
            self._repo().get(customer_id)
        except ObjectNotFoundError:
            return False
        return True

    def get_age(self, customer_id: str) -> int:
        return self._repo().get(customer_id).age()

    def is_deleted_customer(self, customer_id: str) -> bool:
        return str(customer_id) == DELETED_CUSTOMER_ID

    def get_deleted_customer(self) -> str:
        repo = self._repo()
        try:
            return str(repo.get(DELETED_CUSTOMER_ID).id)
        except ObjectNotFoundError:
            placeholder = Customer.deleted_placeholder()
            repo.add(placeholder)
            logger.info("Deleted-customer placeholder created", customer_id=DELETED_CUSTOMER_ID)
            return str(placeholder.id)
