"""Shopping cart aggregate — one per customer.

The cart holds an ordered list of product lines. A product appears at most
once; adding it again merges quantities. Lines never sit at quantity zero:
setting a line to zero removes it. Checkout empties the cart, it is never
deleted.
"""

from datetime import UTC, datetime

from protean import Index, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate(indexes=[Index("customer_id", unique=True)])
class Cart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def product_lines_must_be_unique(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def lines(self):
        """Cart lines in the order they were added."""
        return sorted(self.items, key=lambda item: item.added_at or self.created_at)

    def is_empty(self):
        return not self.items

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity=1):
        """Add a product, or increase its quantity if already in the cart."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        if existing:
            existing.quantity += quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))
        self.updated_at = now

    def update_quantity(self, product_id, quantity):
        """Set a line's quantity. Zero removes the line."""
        if quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product not found in cart"]})

        if quantity == 0:
            self.remove_items(item)
        else:
            item.quantity = quantity
        self.updated_at = datetime.now(UTC)

    def remove_item(self, product_id):
        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product not found in cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    def clear(self):
        if self.items:
            self.remove_items(list(self.items))
        self.updated_at = datetime.now(UTC)
