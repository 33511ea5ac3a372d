"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order and its stock was taken."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    currency = String(max_length=3)
    payment_method = String(required=True, max_length=20)
    payment_status = String(max_length=50)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The customer cancelled a processing order; its stock went back on the shelf."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    restocked_items = Text(required=True)  # JSON: [{"product_id", "quantity"}]
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class ReturnRequested:
    """The customer asked to return a delivered order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = Text(required=True)
    requested_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An operator moved the order to a new status by hand."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=50)
    new_status = String(required=True, max_length=50)
    changed_at = DateTime(required=True)
