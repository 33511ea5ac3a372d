"""Error taxonomy for the storefront.

Every business-rule failure is raised as a ``StorefrontError`` subclass that
carries a stable ``ErrorCode``. The category (class) fixes the HTTP status the
API answers with; the code tells callers exactly which rule declined the
request. Field-level validation of commands and aggregates keeps using
Protean's own ``ValidationError``.
"""

from enum import Enum
from typing import Any

from protean.exceptions import ProteanException


class ErrorCode(Enum):
    # Validation
    INVALID_REQUEST = "InvalidRequest"
    EMPTY_CART = "EmptyCart"
    REASON_REQUIRED = "ReasonRequired"
    UNKNOWN_STATUS = "UnknownStatus"

    # Not found
    CART_NOT_FOUND = "CartNotFound"
    ADDRESS_NOT_FOUND = "AddressNotFound"
    ORDER_NOT_FOUND = "OrderNotFound"
    PRODUCT_NOT_FOUND = "ProductNotFound"
    PAYMENT_INTENT_NOT_FOUND = "PaymentIntentNotFound"

    # Conflict
    INSUFFICIENT_STOCK = "InsufficientStock"
    DUPLICATE_OPERATION = "DuplicateOperation"
    PAYMENT_AMOUNT_MISMATCH = "PaymentAmountMismatch"

    # Authorization
    NOT_OWNER = "NotOwner"

    # State machine
    INVALID_TRANSITION = "InvalidTransition"

    # Payment gateway
    SIGNATURE_MISMATCH = "SignatureMismatch"
    GATEWAY_FAILURE = "GatewayFailure"

    # Persistence
    TRANSACTION_ABORTED = "TransactionAborted"


class StorefrontError(ProteanException):
    """Base class for all declined storefront operations."""

    status_code = 500

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int | None = None,
        **details: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def __reduce__(self):
        return (_rebuild_error, (self.__class__, self.code, self.message, self.status_code, self.details))

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


def _rebuild_error(cls, code, message, status_code, details):
    return cls(code, message, status_code=status_code, **details)


class InvalidRequestError(StorefrontError):
    """Missing or malformed input (the request-level validation category)."""

    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409


class AuthorizationError(StorefrontError):
    status_code = 403


class InvalidTransitionError(StorefrontError):
    status_code = 409


class ExternalServiceError(StorefrontError):
    status_code = 502


class PersistenceError(StorefrontError):
    status_code = 503


# ---------------------------------------------------------------------------
# Constructors for the recurring failures
# ---------------------------------------------------------------------------
def empty_cart() -> InvalidRequestError:
    return InvalidRequestError(ErrorCode.EMPTY_CART, "Cannot place an order with an empty cart.")


def address_not_found(address_id: str) -> NotFoundError:
    return NotFoundError(ErrorCode.ADDRESS_NOT_FOUND, "Delivery address not found.", address_id=str(address_id))


def insufficient_stock(product_id: str, product_name: str) -> ConflictError:
    return ConflictError(
        ErrorCode.INSUFFICIENT_STOCK,
        f'Insufficient stock for product "{product_name}".',
        product_id=str(product_id),
        product_name=product_name,
    )


def order_not_found(order_id: str) -> NotFoundError:
    return NotFoundError(ErrorCode.ORDER_NOT_FOUND, "Order not found.", order_id=str(order_id))


def product_not_found(product_id: str) -> NotFoundError:
    return NotFoundError(ErrorCode.PRODUCT_NOT_FOUND, "Product not found.", product_id=str(product_id))


def not_owner(resource: str) -> AuthorizationError:
    return AuthorizationError(ErrorCode.NOT_OWNER, f"You do not have permission to act on this {resource}.")


def invalid_transition(current: str, action: str) -> InvalidTransitionError:
    return InvalidTransitionError(
        ErrorCode.INVALID_TRANSITION,
        f"Cannot {action} an order that is {current}.",
        current_status=current,
    )


def transaction_aborted(reason: str) -> PersistenceError:
    return PersistenceError(ErrorCode.TRANSACTION_ABORTED, "The transaction was aborted.", reason=reason)
