"""Product aggregate — catalogue entry and the stock counter checkout draws on.

The catalogue owns name, price and images. Checkout never owns a product; it
reads price and stock inside its transaction and only ever mutates
``available_quantity`` through ``decrement_stock`` / ``restock``.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, List, String, Text

from storefront.domain import storefront


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    category = String(max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    images = List(content_type=String(max_length=1000, sanitize=False))
    available_quantity = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def must_have_at_least_one_image(self):
        if not self.images:
            raise ValidationError({"images": ["At least one product image is required"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, price, available_quantity=0, category=None, description=None, original_price=None, images=None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            category=category,
            description=description,
            price=price,
            original_price=original_price,
            images=list(images or []),
            available_quantity=available_quantity,
            created_at=now,
            updated_at=now,
        )

    def primary_image(self):
        return self.images[0] if self.images else None

    # -------------------------------------------------------------------
    # Catalogue edits
    # -------------------------------------------------------------------
    def update_details(self, name=None, price=None, images=None, description=None):
        if name is not None:
            self.name = name
        if price is not None:
            self.price = price
        if images is not None:
            self.images = list(images)
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def has_stock(self, quantity):
        return self.available_quantity >= quantity

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of stock. Refuses to go below zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock(quantity):
            raise ValidationError(
                {"available_quantity": [f"Only {self.available_quantity} units of {self.name} available"]}
            )
        self.available_quantity -= quantity
        self.updated_at = datetime.now(UTC)

    def restock(self, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self.available_quantity += quantity
        self.updated_at = datetime.now(UTC)

    def set_stock(self, quantity):
        if quantity < 0:
            raise ValidationError({"available_quantity": ["Stock cannot be negative"]})
        self.available_quantity = quantity
        self.updated_at = datetime.now(UTC)
