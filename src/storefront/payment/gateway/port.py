"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement. A
gateway payment happens in two steps: the server asks the gateway for a
payment intent (the handle the customer pays against), then the customer's
client sends back a signed confirmation that the server verifies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class IntentResult:
    """A payment intent opened at the gateway."""

    intent_id: str
    amount_minor: int
    currency: str
    receipt: str
    gateway_status: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(self, amount_minor: int, currency: str, receipt: str) -> IntentResult:
        """Open a payment intent for ``amount_minor`` (smallest currency unit)."""
        ...

    @abstractmethod
    def verify_confirmation(self, intent_id: str, payment_id: str, signature: str) -> bool:
        """Check that a payment confirmation really came from the gateway."""
        ...
