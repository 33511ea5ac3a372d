"""Order aggregate — the immutable record of a checkout.

An order is created only by the checkout engine, inside the same transaction
that takes the stock and empties the cart. Line items, the delivery address
and the amounts are snapshots: they are copied at placement and never change
afterwards, whatever happens to the product or the saved address later.
Only the status (and the return reason) moves.

State Machine:
    PROCESSING → CANCELLED                   (customer)
    PROCESSING → SHIPPED → DELIVERED         (operator)
    DELIVERED  → RETURN_REQUESTED            (customer)
Operators may also override the status to any value by hand.
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.errors import ErrorCode, InvalidRequestError, InvalidTransitionError, invalid_transition
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged, ReturnRequested


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURN_REQUESTED = "Return Requested"


class PaymentMethod(Enum):
    COD = "COD"
    GATEWAY = "Gateway"


class PaymentStatus(Enum):
    PENDING_COD = "Pending (COD)"
    PENDING = "Pending"
    PAID = "Paid"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class DeliveryAddress:
    """The address the order ships to, copied from the address book at checkout."""

    name = String(required=True, max_length=100)
    mobile = String(required=True, max_length=20)
    pincode = String(required=True, max_length=10)
    locality = String(max_length=255)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    address_type = String(max_length=10)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """One purchased line, priced as the product stood when the order was placed."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1000, sanitize=False)

    def line_total(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(DeliveryAddress)
    subtotal = Float(default=0.0)
    cod_fee = Float(default=0.0)
    tax_amount = Float(default=0.0)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="INR")
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(max_length=50, default=PaymentStatus.PENDING.value)
    transaction_ref = String(max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PROCESSING.value)
    return_reason = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        lines,
        shipping_address,
        charges,
        payment_method,
        payment_status,
        transaction_ref=None,
        currency="INR",
    ):
        """Create a new order from a checkout.

        Args:
            customer_id: The customer placing the order.
            lines: List of dicts with product_id, name, quantity, price, image.
            shipping_address: Dict with the saved address fields.
            charges: Priced amounts (subtotal, cod_fee, tax_amount, total_amount).
            payment_method: A ``PaymentMethod``.
            payment_status: A ``PaymentStatus``.
            transaction_ref: Gateway payment id, for paid orders.
        """
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            shipping_address=DeliveryAddress(**shipping_address),
            subtotal=charges.subtotal,
            cod_fee=charges.cod_fee,
            tax_amount=charges.tax_amount,
            total_amount=charges.total_amount,
            currency=currency,
            payment_method=payment_method.value,
            payment_status=payment_status.value,
            transaction_ref=transaction_ref,
            status=OrderStatus.PROCESSING.value,
            created_at=now,
            updated_at=now,
        )
        order.add_items([OrderItem(**line) for line in lines])

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                item_count=sum(line["quantity"] for line in lines),
                total_amount=charges.total_amount,
                currency=currency,
                payment_method=payment_method.value,
                payment_status=payment_status.value,
                placed_at=now,
            )
        )
        return order

    def belongs_to(self, customer_id):
        return str(self.customer_id) == str(customer_id)

    # -------------------------------------------------------------------
    # Customer transitions
    # -------------------------------------------------------------------
    def cancel(self, window_hours=0, now=None):
        """Cancel a processing order.

        The caller restocks the items in the same transaction. With a
        non-zero ``window_hours`` the order must also be younger than the
        window.
        """
        current = OrderStatus(self.status)
        if current != OrderStatus.PROCESSING:
            raise invalid_transition(current.value, "cancel")

        now = now or datetime.now(UTC)
        if window_hours and self.created_at and now - self.created_at > timedelta(hours=window_hours):
            raise InvalidTransitionError(
                ErrorCode.INVALID_TRANSITION,
                f"Orders can only be cancelled within {window_hours} hours of placement.",
                current_status=current.value,
            )

        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                restocked_items=json.dumps(
                    [{"product_id": str(i.product_id), "quantity": i.quantity} for i in self.items]
                ),
                cancelled_at=now,
            )
        )

    def request_return(self, reason):
        if not reason or not reason.strip():
            raise InvalidRequestError(ErrorCode.REASON_REQUIRED, "A reason for the return is required.")

        current = OrderStatus(self.status)
        if current != OrderStatus.DELIVERED:
            raise invalid_transition(current.value, "return")

        now = datetime.now(UTC)
        self.status = OrderStatus.RETURN_REQUESTED.value
        self.return_reason = reason.strip()
        self.updated_at = now

        self.raise_(
            ReturnRequested(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                reason=self.return_reason,
                requested_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Operator override
    # -------------------------------------------------------------------
    def override_status(self, new_status):
        """Set any known status without consulting the state machine."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidRequestError(
                ErrorCode.UNKNOWN_STATUS,
                f"Unknown order status: {new_status}",
                allowed=[s.value for s in OrderStatus],
            ) from None

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )
