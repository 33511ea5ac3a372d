"""Domain events for the PaymentIntent aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="PaymentIntent")
class PaymentIntentCreated:
    """The gateway opened an intent to collect the cart's total."""

    __version__ = 1

    intent_id = String(required=True)
    customer_id = Identifier(required=True)
    amount = Float(required=True)
    amount_minor = Integer(required=True)
    currency = String(required=True)
    receipt = String(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="PaymentIntent")
class PaymentConfirmed:
    """A verified payment settled the intent and its order was placed."""

    __version__ = 1

    intent_id = String(required=True)
    customer_id = Identifier(required=True)
    payment_id = String(required=True)
    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@storefront.event(part_of="PaymentIntent")
class PaymentUnfulfilled:
    """A verified payment was taken but checkout refused to place its order."""

    __version__ = 1

    intent_id = String(required=True)
    customer_id = Identifier(required=True)
    payment_id = String(required=True)
    reason = String(required=True)
    recorded_at = DateTime(required=True)
