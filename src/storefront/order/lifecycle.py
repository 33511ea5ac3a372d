"""Order lifecycle — cancellation, return requests and operator status changes.

Cancellation is the inverse of checkout: every line's quantity goes back to
its product and the order becomes Cancelled, all in one transaction. If any
product cannot be restocked the cancellation aborts and nothing changes.
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalog.product import Product
from storefront.domain import logger, storefront
from storefront.errors import not_owner
from storefront.order.order import Order
from storefront.shared.transaction import TransactionContext


class OrderLifecycle:
    def __init__(self, orders=None, products=None, cancellation_window_hours=None):
        self.orders = orders if orders is not None else current_domain.repository_for(Order)
        self.products = products if products is not None else current_domain.repository_for(Product)
        if cancellation_window_hours is None:
            cancellation_window_hours = getattr(current_domain, "CANCELLATION_WINDOW_HOURS", 0)
        self.cancellation_window_hours = cancellation_window_hours

    def _owned_order(self, tx, order_id, customer_id):
        order = self.orders.get_order(tx, order_id)
        if not order.belongs_to(customer_id):
            raise not_owner("order")
        return order

    def cancel_order(self, tx, order_id, customer_id):
        order = self._owned_order(tx, order_id, customer_id)
        order.cancel(window_hours=self.cancellation_window_hours)

        for item in order.items:
            self.products.increment(tx, item.product_id, item.quantity)
        self.orders.update_status(tx, order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            customer_id=str(customer_id),
            restocked_lines=len(order.items),
        )
        return order

    def request_return(self, tx, order_id, customer_id, reason):
        order = self._owned_order(tx, order_id, customer_id)
        order.request_return(reason)
        self.orders.update_status(tx, order)

        logger.info("Return requested", order_id=str(order.id), customer_id=str(customer_id))
        return order

    def update_status(self, tx, order_id, new_status):
        order = self.orders.get_order(tx, order_id)
        previous = order.status
        order.override_status(new_status)
        self.orders.update_status(tx, order)

        logger.info("Order status overridden", order_id=str(order.id), previous=previous, status=order.status)
        return order


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@storefront.command(part_of="Order")
class RequestReturn:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = Text()


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        OrderLifecycle().cancel_order(TransactionContext.begin(), command.order_id, command.customer_id)

    @handle(RequestReturn)
    def request_return(self, command):
        OrderLifecycle().request_return(TransactionContext.begin(), command.order_id, command.customer_id, command.reason)

    @handle(UpdateOrderStatus)
    def update_status(self, command):
        OrderLifecycle().update_status(TransactionContext.begin(), command.order_id, command.status)
