"""Inventory store — product reads and conditional stock updates for the core."""

from protean.exceptions import ObjectNotFoundError

from storefront.catalog.product import Product
from storefront.domain import logger, storefront
from storefront.errors import product_not_found


@storefront.repository(part_of=Product)
class ProductRepository:
    def get_for_checkout(self, tx, product_ids):
        """Load every product a checkout needs, in the order asked for.

        Raises ``ProductNotFound`` when a cart references a product that has
        since been removed from the catalogue.
        """
        tx.ensure_open()
        products = []
        for product_id in product_ids:
            product = self.get_or_none(product_id)
            if product is None:
                raise product_not_found(product_id)
            products.append(product)
        return products

    def try_decrement(self, tx, product_id, quantity):
        """Decrement stock only if enough remains, inside ``tx``.

        Returns ``False`` (and writes nothing) when the product no longer has
        ``quantity`` units available.
        """
        tx.ensure_open()
        product = self.get_or_none(product_id)
        if product is None or not product.has_stock(quantity):
            return False

        product.decrement_stock(quantity)
        self.add(product)
        return True

    def increment(self, tx, product_id, quantity):
        tx.ensure_open()
        try:
            product = self.get(product_id)
        except ObjectNotFoundError as exc:
            logger.error("Cannot restock missing product", product_id=str(product_id), quantity=quantity)
            raise product_not_found(product_id) from exc

        product.restock(quantity)
        self.add(product)
        return product

    def listing(self, category=None):
        """Catalogue browsing: every product, newest first, optionally in one category."""
        query = self.query
        if category:
            query = query.filter(category=category)
        return query.order_by("-created_at").all().items
