"""Order queries — the customer's order history, order status and the admin list."""

from protean.utils.globals import current_domain

from storefront.errors import not_owner, order_not_found
from storefront.order.order import Order


def order_summary(order):
    return {
        "order_id": str(order.id),
        "customer_id": str(order.customer_id),
        "status": order.status,
        "items": [
            {
                "product_id": str(item.product_id),
                "name": item.name,
                "quantity": item.quantity,
                "price": item.price,
                "image": item.image,
            }
            for item in order.items
        ],
        "shipping_address": order.shipping_address.to_dict() if order.shipping_address else None,
        "subtotal": order.subtotal,
        "cod_fee": order.cod_fee,
        "tax_amount": order.tax_amount,
        "total_amount": order.total_amount,
        "currency": order.currency,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "transaction_ref": order.transaction_ref,
        "return_reason": order.return_reason,
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


def orders_for_customer(customer_id):
    """The customer's orders, newest first."""
    return [order_summary(o) for o in current_domain.repository_for(Order).for_customer(customer_id)]


def order_for_owner(order_id, customer_id):
    order = current_domain.repository_for(Order).get_or_none(order_id)
    if order is None:
        raise order_not_found(order_id)
    if not order.belongs_to(customer_id):
        raise not_owner("order")
    return order


def all_orders():
    return [order_summary(o) for o in current_domain.repository_for(Order).all_orders()]
