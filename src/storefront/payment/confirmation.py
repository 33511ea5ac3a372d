"""Gateway checkout — payment intents and payment confirmation.

A gateway checkout happens in two commands:

1. ``CreatePaymentIntent`` prices the cart (no COD fee, total rounded to a
   whole unit), asks the gateway for an intent in minor units and records it.
   Nothing else is written: stock and cart are untouched.
2. ``ConfirmPayment`` carries the gateway's signed confirmation. The
   signature is verified before anything is read for writing; a forged or
   tampered confirmation is refused and the cart stays as it was. A verified
   confirmation places the order with ``Paid`` status, pinned to the amount
   the intent was opened for.

Checkout can still refuse a verified payment (stock sold out, cart changed
since the intent). That refusal rolls the confirmation back, so
``settle_payment`` follows it with ``RecordUnfulfilledPayment`` in a
transaction of its own, leaving the payment id on the intent for a refund.
"""

from uuid import uuid4

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.checkout.engine import CheckoutEngine, PaymentTerms
from storefront.checkout.pricing import to_minor_units
from storefront.domain import logger, storefront
from storefront.errors import ErrorCode, ExternalServiceError, StorefrontError, not_owner
from storefront.order.order import PaymentMethod
from storefront.payment.gateway import get_gateway
from storefront.payment.intent import PaymentIntent
from storefront.shared.dispatch import dispatch
from storefront.shared.transaction import TransactionContext


@storefront.command(part_of="PaymentIntent")
class CreatePaymentIntent:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.command(part_of="PaymentIntent")
class ConfirmPayment:
    customer_id = Identifier(required=True)
    intent_id = String(required=True, max_length=255)
    payment_id = String(required=True, max_length=255)
    signature = String(required=True, max_length=255)


@storefront.command(part_of="PaymentIntent")
class RecordUnfulfilledPayment:
    intent_id = String(required=True, max_length=255)
    payment_id = String(required=True, max_length=255)
    reason = String(required=True, max_length=100)


@storefront.command_handler(part_of=PaymentIntent)
class GatewayCheckoutHandler:
    @handle(CreatePaymentIntent)
    def create_payment_intent(self, command):
        tx = TransactionContext.begin()
        quote = CheckoutEngine().quote(tx, command.customer_id, command.address_id, PaymentMethod.GATEWAY)

        total = quote.charges.total_amount
        result = get_gateway().create_payment_intent(
            amount_minor=to_minor_units(total),
            currency=current_domain.CURRENCY,
            receipt=f"receipt_{uuid4().hex[:10]}",
        )

        intent = PaymentIntent.open(result, command.customer_id, command.address_id, total)
        current_domain.repository_for(PaymentIntent).record(tx, intent)

        logger.info(
            "Payment intent created",
            intent_id=intent.intent_id,
            customer_id=str(command.customer_id),
            amount=total,
        )
        return {
            "intent_id": intent.intent_id,
            "amount": intent.amount,
            "amount_minor": intent.amount_minor,
            "currency": intent.currency,
            "receipt": intent.receipt,
            "key_id": current_domain.PAYMENT_KEY_ID,
        }

    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        tx = TransactionContext.begin()
        repo = current_domain.repository_for(PaymentIntent)

        intent = repo.by_intent_id(tx, command.intent_id)
        if not intent.belongs_to(command.customer_id):
            raise not_owner("payment")
        intent.ensure_unconfirmed()

        if not get_gateway().verify_confirmation(command.intent_id, command.payment_id, command.signature):
            logger.warning(
                "Payment signature mismatch",
                intent_id=command.intent_id,
                customer_id=str(command.customer_id),
            )
            raise ExternalServiceError(
                ErrorCode.SIGNATURE_MISMATCH,
                "Payment verification failed.",
                status_code=400,
                intent_id=command.intent_id,
            )

        order = CheckoutEngine().place_order(
            tx,
            customer_id=command.customer_id,
            address_id=intent.address_id,
            terms=PaymentTerms.gateway_paid(command.payment_id),
            expected_total=intent.amount,
        )

        intent.confirm(command.payment_id, order.id)
        repo.record(tx, intent)

        logger.info(
            "Payment confirmed",
            intent_id=intent.intent_id,
            payment_id=command.payment_id,
            order_id=str(order.id),
        )
        return str(order.id)

    @handle(RecordUnfulfilledPayment)
    def record_unfulfilled_payment(self, command):
        tx = TransactionContext.begin()
        repo = current_domain.repository_for(PaymentIntent)

        intent = repo.by_intent_id(tx, command.intent_id)
        if intent.is_confirmed():
            logger.info(
                "Intent already confirmed, unfulfilled payment not recorded",
                intent_id=intent.intent_id,
                payment_id=command.payment_id,
            )
            return

        intent.mark_unfulfilled(command.payment_id, command.reason)
        repo.record(tx, intent)

        logger.warning(
            "Verified payment placed no order",
            intent_id=intent.intent_id,
            payment_id=command.payment_id,
            reason=command.reason,
        )


# Refusals raised before the payment signature has been verified.
_REFUSED_BEFORE_VERIFICATION = frozenset(
    {
        ErrorCode.PAYMENT_INTENT_NOT_FOUND,
        ErrorCode.NOT_OWNER,
        ErrorCode.DUPLICATE_OPERATION,
        ErrorCode.SIGNATURE_MISMATCH,
    }
)


def settle_payment(command):
    """Dispatch ``ConfirmPayment`` and return the placed order's id.

    When checkout refuses a payment that was already verified, the payment is
    recorded on its intent before the refusal is re-raised.
    """
    try:
        return dispatch(command)
    except StorefrontError as exc:
        if exc.code in _REFUSED_BEFORE_VERIFICATION:
            raise
        dispatch(
            RecordUnfulfilledPayment(
                intent_id=command.intent_id,
                payment_id=command.payment_id,
                reason=exc.code.value,
            )
        )
        raise
