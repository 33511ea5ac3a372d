"""PaymentIntent aggregate — a gateway payment waiting to become an order.

An intent records what the gateway was asked to collect: the amount priced
from the cart, the customer and the delivery address chosen. Confirming the
intent places the order; an intent can be confirmed only once.

A verified payment that checkout then refuses (stock sold out, cart changed)
leaves the intent Unfulfilled with the payment id kept for refund follow-up.
An Unfulfilled intent can still be confirmed once the cause is resolved.

State Machine:
    CREATED → CONFIRMED
    CREATED → UNFULFILLED → CONFIRMED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront
from storefront.errors import ConflictError, ErrorCode, NotFoundError
from storefront.payment.events import PaymentConfirmed, PaymentIntentCreated, PaymentUnfulfilled


class IntentStatus(Enum):
    CREATED = "Created"
    CONFIRMED = "Confirmed"
    UNFULFILLED = "Unfulfilled"


@storefront.aggregate
class PaymentIntent:
    intent_id = String(required=True, max_length=255)
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    amount_minor = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="INR")
    receipt = String(required=True, max_length=100)
    status = String(choices=IntentStatus, default=IntentStatus.CREATED.value)
    payment_id = String(max_length=255)
    failure_reason = String(max_length=100)
    order_id = Identifier()
    created_at = DateTime()
    confirmed_at = DateTime()

    @classmethod
    def open(cls, result, customer_id, address_id, amount):
        """Record an intent the gateway has just created."""
        now = datetime.now(UTC)
        intent = cls(
            intent_id=result.intent_id,
            customer_id=customer_id,
            address_id=address_id,
            amount=amount,
            amount_minor=result.amount_minor,
            currency=result.currency,
            receipt=result.receipt,
            status=IntentStatus.CREATED.value,
            created_at=now,
        )
        intent.raise_(
            PaymentIntentCreated(
                intent_id=intent.intent_id,
                customer_id=str(customer_id),
                amount=amount,
                amount_minor=result.amount_minor,
                currency=result.currency,
                receipt=result.receipt,
                created_at=now,
            )
        )
        return intent

    def belongs_to(self, customer_id):
        return str(self.customer_id) == str(customer_id)

    def is_confirmed(self):
        return IntentStatus(self.status) == IntentStatus.CONFIRMED

    def ensure_unconfirmed(self):
        if self.is_confirmed():
            raise ConflictError(
                ErrorCode.DUPLICATE_OPERATION,
                "This payment has already been confirmed.",
                intent_id=self.intent_id,
                order_id=str(self.order_id),
            )

    def confirm(self, payment_id, order_id):
        self.ensure_unconfirmed()

        now = datetime.now(UTC)
        self.status = IntentStatus.CONFIRMED.value
        self.payment_id = payment_id
        self.order_id = order_id
        self.confirmed_at = now

        self.raise_(
            PaymentConfirmed(
                intent_id=self.intent_id,
                customer_id=str(self.customer_id),
                payment_id=payment_id,
                order_id=str(order_id),
                confirmed_at=now,
            )
        )

    def mark_unfulfilled(self, payment_id, reason):
        """Keep a verified payment that placed no order, so it can be refunded."""
        self.ensure_unconfirmed()

        now = datetime.now(UTC)
        self.status = IntentStatus.UNFULFILLED.value
        self.payment_id = payment_id
        self.failure_reason = reason

        self.raise_(
            PaymentUnfulfilled(
                intent_id=self.intent_id,
                customer_id=str(self.customer_id),
                payment_id=payment_id,
                reason=reason,
                recorded_at=now,
            )
        )


@storefront.repository(part_of=PaymentIntent)
class PaymentIntentRepository:
    def by_intent_id(self, tx, intent_id):
        """Load an intent by the gateway's id. Raises ``PaymentIntentNotFound``."""
        tx.ensure_open()
        try:
            return self.find_by(intent_id=intent_id)
        except ObjectNotFoundError:
            raise NotFoundError(
                ErrorCode.PAYMENT_INTENT_NOT_FOUND,
                "Payment intent not found.",
                intent_id=intent_id,
            ) from None

    def record(self, tx, intent):
        tx.ensure_open()
        self.add(intent)
        return intent
