"""Configurable fake payment gateway for development and testing.

Opens intents locally instead of calling out, and verifies confirmations
with the same HMAC scheme as the hosted gateway so tests can sign their own
confirmations with ``sign_confirmation``. It can be configured at runtime to
fail intent creation.
"""

from uuid import uuid4

from storefront.errors import ErrorCode, ExternalServiceError
from storefront.payment.gateway.port import IntentResult, PaymentGateway
from storefront.payment.gateway.signature import signature_matches


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret: str = "storefront-test-secret") -> None:
        self.secret = secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(self, amount_minor: int, currency: str, receipt: str) -> IntentResult:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_minor": amount_minor,
                "currency": currency,
                "receipt": receipt,
            }
        )

        if not self.should_succeed:
            raise ExternalServiceError(ErrorCode.GATEWAY_FAILURE, self.failure_reason)

        return IntentResult(
            intent_id=f"fake_intent_{uuid4().hex[:14]}",
            amount_minor=amount_minor,
            currency=currency,
            receipt=receipt,
            gateway_status="created",
        )

    def verify_confirmation(self, intent_id: str, payment_id: str, signature: str) -> bool:
        self.calls.append(
            {
                "method": "verify_confirmation",
                "intent_id": intent_id,
                "payment_id": payment_id,
            }
        )
        return signature_matches(self.secret, intent_id, payment_id, signature)
