"""Payment aggregate: the immutable record written when an order is confirmed."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String

from bookshop.domain import bookshop


class PaymentType(Enum):
    CASH = "Cash"
    CARD = "Card"
    APPLE_PAY = "ApplePay"
    GOOGLE_PAY = "GooglePay"
    BLIK = "Blik"


@bookshop.event(part_of="Payment")
class PaymentRecorded:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True)
    payment_type = String(required=True)
    paid_at = DateTime(required=True)


@bookshop.aggregate
class Payment:
    order_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    payment_type = String(required=True, choices=PaymentType)
    paid_at = DateTime(required=True)

    @classmethod
    def record(cls, order_id, amount, payment_type, paid_at=None):
        paid_at = paid_at or datetime.now(UTC)
        payment = cls(
            order_id=order_id,
            amount=amount,
            payment_type=PaymentType(payment_type).value,
            paid_at=paid_at,
        )
        payment.raise_(
            PaymentRecorded(
                payment_id=str(payment.id),
                order_id=str(order_id),
                amount=amount,
                payment_type=payment.payment_type,
                paid_at=paid_at,
            )
        )
        return payment


@bookshop.repository(part_of=Payment)
class PaymentRepository:
    def for_order(self, order_id) -> list[Payment]:
        return self._dao.query.filter(order_id=str(order_id)).all().items
