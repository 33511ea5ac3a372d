"""Order placement — command and handler.

Cash-on-delivery orders are placed directly. Gateway orders go through a
payment intent and are placed when the payment is confirmed (see
``storefront.payment.confirmation``).
"""

from protean import handle
from protean.fields import Identifier, String

from storefront.checkout.engine import CheckoutEngine, PaymentTerms
from storefront.domain import storefront
from storefront.errors import ErrorCode, InvalidRequestError
from storefront.order.order import Order, PaymentMethod
from storefront.shared.transaction import TransactionContext


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if PaymentMethod(command.payment_method) != PaymentMethod.COD:
            raise InvalidRequestError(
                ErrorCode.INVALID_REQUEST,
                "Gateway orders are placed by confirming a payment intent.",
            )

        tx = TransactionContext.begin()
        order = CheckoutEngine().place_order(
            tx,
            customer_id=command.customer_id,
            address_id=command.address_id,
            terms=PaymentTerms.cash_on_delivery(),
        )
        return str(order.id)
