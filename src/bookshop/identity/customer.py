"""Customer aggregate, as far as ordering is concerned.

Accounts, credentials and profiles are managed by the identity service. The
bookshop keeps the owner reference for orders, the date of birth for age
checks, and one sentinel row that inherits the history of deleted accounts.
"""

from datetime import UTC, date, datetime

from protean.fields import Date, String

from bookshop.domain import bookshop

DELETED_CUSTOMER_ID = "deleted-customer"
DELETED_CUSTOMER_USERNAME = "deleted_user"


def age_on(date_of_birth: date, today: date) -> int:
    """Whole years between ``date_of_birth`` and ``today``."""
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


@bookshop.aggregate
class Customer:
    username = String(required=True, max_length=100)
    date_of_birth = Date(required=True)

    @classmethod
    def deleted_placeholder(cls) -> "Customer":
        return cls(
            id=DELETED_CUSTOMER_ID,
            username=DELETED_CUSTOMER_USERNAME,
            date_of_birth=date(1900, 1, 1),
        )

    @property
    def is_deleted_placeholder(self) -> bool:
        return str(self.id) == DELETED_CUSTOMER_ID

    def age(self, today: date | None = None) -> int:
        return age_on(self.date_of_birth, today or datetime.now(UTC).date())
