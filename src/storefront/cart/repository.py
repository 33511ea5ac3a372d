"""Cart store — customer cart lookup and clearing."""

from protean.exceptions import ObjectNotFoundError

from storefront.cart.cart import Cart
from storefront.domain import storefront


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_customer(self, customer_id):
        """Return the customer's cart, or ``None`` if it was never created."""
        try:
            return self.find_by(customer_id=str(customer_id))
        except ObjectNotFoundError:
            return None

    def get_cart(self, tx, customer_id):
        tx.ensure_open()
        return self.for_customer(customer_id)

    def clear_cart(self, tx, cart):
        tx.ensure_open()
        cart.clear()
        self.add(cart)
        return cart
