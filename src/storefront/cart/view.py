"""Read side of the cart: lines resolved against the live catalogue."""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog.product import Product


def cart_view(customer_id):
    """The customer's cart with current names, prices and stock.

    Lines whose product has left the catalogue are dropped from the view; a
    customer who never added anything sees an empty cart.
    """
    cart = current_domain.repository_for(Cart).for_customer(customer_id)
    products = current_domain.repository_for(Product)

    items = []
    if cart is not None:
        for line in cart.lines():
            product = products.get_or_none(line.product_id)
            if product is None:
                continue
            items.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "price": product.price,
                    "image": product.primary_image(),
                    "quantity": line.quantity,
                    "available_quantity": product.available_quantity,
                    "line_total": round(product.price * line.quantity, 2),
                }
            )

    return {
        "customer_id": str(customer_id),
        "items": items,
        "item_count": sum(item["quantity"] for item in items),
        "subtotal": round(sum(item["line_total"] for item in items), 2),
    }
