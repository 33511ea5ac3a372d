"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- HostedGateway for production, selected with ``PAYMENT_GATEWAY = "hosted"``
"""

from protean.utils.globals import current_domain

from storefront.payment.gateway.fake_adapter import FakeGateway
from storefront.payment.gateway.hosted_adapter import HostedGateway
from storefront.payment.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _gateway_from_config() -> PaymentGateway:
    secret = current_domain.PAYMENT_KEY_SECRET
    if current_domain.PAYMENT_GATEWAY == "hosted":
        return HostedGateway(
            key_id=current_domain.PAYMENT_KEY_ID,
            key_secret=secret,
            api_base_url=current_domain.PAYMENT_API_URL,
        )
    return FakeGateway(secret=secret)


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from configuration on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _gateway_from_config()
    return _current_gateway


def _close_current() -> None:
    close = getattr(_current_gateway, "close", None)
    if close is not None:
        close()


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    if gateway is not _current_gateway:
        _close_current()
    _current_gateway = gateway


def reset_gateway() -> None:
    """Close the active gateway and fall back to the configured one."""
    global _current_gateway
    _close_current()
    _current_gateway = None
