"""Catalogue seeding and stock administration — commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalog.product import Product
from storefront.domain import logger, storefront
from storefront.errors import product_not_found


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    images = Text(required=True)  # JSON array of image URLs
    available_quantity = Integer(default=0, min_value=0)
    category = String(max_length=100)
    description = Text()
    original_price = Float(min_value=0.0)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    price = Float(min_value=0.0)
    images = Text()  # JSON array of image URLs
    description = Text()


@storefront.command(part_of="Product")
class SetStock:
    product_id = Identifier(required=True)
    available_quantity = Integer(required=True, min_value=0)


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            images=json.loads(command.images),
            available_quantity=command.available_quantity,
            category=command.category,
            description=command.description,
            original_price=command.original_price,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product added", product_id=str(product.id), stock=product.available_quantity)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_or_none(command.product_id)
        if product is None:
            raise product_not_found(command.product_id)
        product.update_details(
            name=command.name,
            price=command.price,
            images=json.loads(command.images) if command.images else None,
            description=command.description,
        )
        repo.add(product)

    @handle(SetStock)
    def set_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_or_none(command.product_id)
        if product is None:
            raise product_not_found(command.product_id)
        product.set_stock(command.available_quantity)
        repo.add(product)
        logger.info("Stock level set", product_id=str(product.id), stock=product.available_quantity)
