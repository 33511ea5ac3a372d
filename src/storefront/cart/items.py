"""Cart item management — commands and handler.

The cart is created lazily on the first add. Adding a product that is
already in the cart merges the quantities.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog.product import Product
from storefront.domain import storefront
from storefront.errors import ErrorCode, NotFoundError, product_not_found


@storefront.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


def _existing_cart(repo, customer_id):
    cart = repo.for_customer(customer_id)
    if cart is None:
        raise NotFoundError(ErrorCode.CART_NOT_FOUND, "Cart not found.", customer_id=str(customer_id))
    return cart


@storefront.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if current_domain.repository_for(Product).get_or_none(command.product_id) is None:
            raise product_not_found(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            cart = Cart.create(customer_id=command.customer_id)

        cart.add_item(command.product_id, command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.customer_id)
        cart.update_quantity(command.product_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.customer_id)
        cart.remove_item(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        if cart is not None:
            cart.clear()
            repo.add(cart)
