"""Invoice for a delivered order.

Built entirely from the order's snapshot (items, address, amounts), which is
why those fields are frozen at placement. Rendering to PDF is left to
whoever consumes the structured invoice.
"""

from dataclasses import dataclass, field

from storefront.errors import ErrorCode, InvalidTransitionError
from storefront.order.order import OrderStatus


@dataclass(frozen=True)
class InvoiceLine:
    name: str
    quantity: int
    price: float
    line_total: float

    def describe(self):
        return f"{self.quantity} x {self.price:.2f} = {self.line_total:.2f}"


@dataclass(frozen=True)
class Invoice:
    order_id: str
    customer_id: str
    issued_for: str
    currency: str
    payment_method: str
    shipping_address: dict
    lines: list[InvoiceLine] = field(default_factory=list)
    subtotal: float = 0.0
    cod_fee: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0
    note: str = "Thank you for shopping with us!"


def build_invoice(order) -> Invoice:
    if order.status != OrderStatus.DELIVERED.value:
        raise InvalidTransitionError(
            ErrorCode.INVALID_TRANSITION,
            "Invoice is available only after delivery.",
            current_status=order.status,
        )

    address = order.shipping_address
    return Invoice(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        issued_for=address.name,
        currency=order.currency,
        payment_method=order.payment_method,
        shipping_address=address.to_dict(),
        lines=[
            InvoiceLine(
                name=item.name,
                quantity=item.quantity,
                price=item.price,
                line_total=round(item.line_total(), 2),
            )
            for item in order.items
        ],
        subtotal=order.subtotal,
        cod_fee=order.cod_fee,
        tax_amount=order.tax_amount,
        total_amount=order.total_amount,
    )
