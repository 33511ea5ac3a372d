"""Order ledger — append-mostly store of order snapshots."""

from storefront.domain import storefront
from storefront.errors import order_not_found
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def create(self, tx, order):
        tx.ensure_open()
        self.add(order)
        return str(order.id)

    def get_order(self, tx, order_id):
        """Load an order inside ``tx``. Raises ``OrderNotFound``."""
        tx.ensure_open()
        order = self.get_or_none(order_id)
        if order is None:
            raise order_not_found(order_id)
        return order

    def update_status(self, tx, order):
        tx.ensure_open()
        self.add(order)
        return order

    def for_customer(self, customer_id):
        """The customer's orders, newest first."""
        return self.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items

    def all_orders(self):
        return self.query.order_by("-created_at").all().items
