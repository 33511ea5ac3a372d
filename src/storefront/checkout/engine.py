"""Checkout engine — converts a customer's cart into an order.

Everything happens inside the caller's transaction context: the cart, the
address and the products are read, stock is re-checked and decremented, the
order is written and the cart is emptied. A failure at any step raises, the
surrounding unit of work rolls back, and cart, stock and ledger are left
exactly as they were.

Concurrent checkouts against the same product are settled by the store: each
decrement bumps the product's version, the second commit fails its version
check, and the command handler re-runs that checkout in a fresh transaction
where ``try_decrement`` sees the stock the first one left behind.
"""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog.product import Product
from storefront.checkout.pricing import OrderCharges, price_order
from storefront.customer.address_book import AddressBook
from storefront.domain import logger
from storefront.errors import (
    ConflictError,
    ErrorCode,
    StorefrontError,
    address_not_found,
    empty_cart,
    insufficient_stock,
)
from storefront.order.order import Order, PaymentMethod, PaymentStatus


@dataclass(frozen=True)
class PaymentTerms:
    method: PaymentMethod
    status: PaymentStatus
    transaction_ref: str | None = None

    @classmethod
    def cash_on_delivery(cls):
        return cls(method=PaymentMethod.COD, status=PaymentStatus.PENDING_COD)

    @classmethod
    def gateway_paid(cls, transaction_ref):
        return cls(method=PaymentMethod.GATEWAY, status=PaymentStatus.PAID, transaction_ref=transaction_ref)


@dataclass
class Quote:
    """A priced, stock-checked view of the cart. Nothing has been written."""

    cart: Cart
    shipping_address: dict
    lines: list[dict] = field(default_factory=list)
    charges: OrderCharges | None = None


class CheckoutEngine:
    def __init__(self, carts=None, products=None, address_books=None, orders=None, cod_fee=None, tax_rate=None, currency=None):
        self.carts = carts if carts is not None else current_domain.repository_for(Cart)
        self.products = products if products is not None else current_domain.repository_for(Product)
        self.address_books = address_books if address_books is not None else current_domain.repository_for(AddressBook)
        self.orders = orders if orders is not None else current_domain.repository_for(Order)
        self.cod_fee = cod_fee if cod_fee is not None else getattr(current_domain, "COD_FEE", 0.0)
        self.tax_rate = tax_rate if tax_rate is not None else getattr(current_domain, "TAX_RATE", 0.0)
        self.currency = currency or getattr(current_domain, "CURRENCY", "INR")

    def quote(self, tx, customer_id, address_id, payment_method: PaymentMethod) -> Quote:
        """Validate the cart against current stock and price it."""
        cart = self.carts.get_cart(tx, customer_id)
        if cart is None or cart.is_empty():
            raise empty_cart()

        address = self.address_books.get_address(tx, customer_id, address_id)
        if address is None:
            raise address_not_found(address_id)

        cart_lines = cart.lines()
        products = self.products.get_for_checkout(tx, [line.product_id for line in cart_lines])

        lines = []
        for line, product in zip(cart_lines, products, strict=True):
            if not product.has_stock(line.quantity):
                raise insufficient_stock(product.id, product.name)
            lines.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "quantity": line.quantity,
                    "price": product.price,
                    "image": product.primary_image(),
                }
            )

        charges = price_order(lines, payment_method, cod_fee=self.cod_fee, tax_rate=self.tax_rate)
        return Quote(cart=cart, shipping_address=address.as_dict(), lines=lines, charges=charges)

    def place_order(self, tx, customer_id, address_id, terms: PaymentTerms, expected_total=None) -> Order:
        """Place an order from the customer's cart.

        ``expected_total`` pins the amount a gateway already collected; a cart
        that no longer prices to it is refused before anything is written.
        """
        try:
            quote = self.quote(tx, customer_id, address_id, terms.method)

            if expected_total is not None and quote.charges.total_amount != float(expected_total):
                raise ConflictError(
                    ErrorCode.PAYMENT_AMOUNT_MISMATCH,
                    "The cart changed after payment was initiated.",
                    expected_total=float(expected_total),
                    cart_total=quote.charges.total_amount,
                )

            for line in quote.lines:
                if not self.products.try_decrement(tx, line["product_id"], line["quantity"]):
                    raise insufficient_stock(line["product_id"], line["name"])

            order = Order.place(
                customer_id=customer_id,
                lines=quote.lines,
                shipping_address=quote.shipping_address,
                charges=quote.charges,
                payment_method=terms.method,
                payment_status=terms.status,
                transaction_ref=terms.transaction_ref,
                currency=self.currency,
            )
            self.orders.create(tx, order)
            self.carts.clear_cart(tx, quote.cart)
        except StorefrontError as exc:
            logger.warning(
                "Checkout declined",
                customer_id=str(customer_id),
                code=exc.code.value,
                reason=exc.message,
            )
            raise

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(customer_id),
            payment_method=terms.method.value,
            total_amount=order.total_amount,
        )
        return order
