"""FastAPI routes for the storefront — cart, addresses, checkout, orders and admin.

The caller's identity is taken from the ``X-Customer-Id`` header, which the
authentication layer in front of this service is expected to set.
"""

import json

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddProductRequest,
    AddressIdResponse,
    AddressRequest,
    AddToCartRequest,
    CartResponse,
    CheckoutRequest,
    ConfirmPaymentRequest,
    InvoiceResponse,
    OrderIdResponse,
    OrderResponse,
    OrderStatusResponse,
    PaymentIntentResponse,
    ProductIdResponse,
    ProductResponse,
    RequestReturnRequest,
    SavedAddressResponse,
    SetStockRequest,
    StatusResponse,
    UpdateAddressRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.view import cart_view
from storefront.catalog.management import AddProduct, SetStock, UpdateProduct
from storefront.catalog.product import Product
from storefront.checkout.placement import PlaceOrder
from storefront.customer.address_book import AddressBook
from storefront.customer.addresses import AddAddress, RemoveAddress, UpdateAddress
from storefront.errors import product_not_found
from storefront.order.invoice import build_invoice
from storefront.order.lifecycle import CancelOrder, RequestReturn, UpdateOrderStatus
from storefront.order.order import PaymentMethod
from storefront.order.views import all_orders, order_for_owner, order_summary, orders_for_customer
from storefront.payment.confirmation import ConfirmPayment, CreatePaymentIntent, settle_payment
from storefront.shared.dispatch import dispatch

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(x_customer_id: str = Header()) -> CartResponse:
    return CartResponse(**cart_view(x_customer_id))


@cart_router.post("/items", status_code=201, response_model=StatusResponse)
async def add_to_cart(body: AddToCartRequest, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(AddToCart(customer_id=x_customer_id, product_id=body.product_id, quantity=body.quantity))
    return StatusResponse()


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def update_cart_item(product_id: str, body: UpdateCartItemRequest, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(UpdateCartItem(customer_id=x_customer_id, product_id=product_id, quantity=body.quantity))
    return StatusResponse()


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_from_cart(product_id: str, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(RemoveFromCart(customer_id=x_customer_id, product_id=product_id))
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(x_customer_id: str = Header()) -> StatusResponse:
    dispatch(ClearCart(customer_id=x_customer_id))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Address Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/addresses", tags=["addresses"])


@address_router.get("", response_model=list[SavedAddressResponse])
async def list_addresses(x_customer_id: str = Header()) -> list[SavedAddressResponse]:
    book = current_domain.repository_for(AddressBook).for_customer(x_customer_id)
    if book is None:
        return []
    return [SavedAddressResponse(address_id=str(a.id), **a.as_dict()) for a in book.addresses]


@address_router.post("", status_code=201, response_model=AddressIdResponse)
async def add_address(body: AddressRequest, x_customer_id: str = Header()) -> AddressIdResponse:
    result = dispatch(AddAddress(customer_id=x_customer_id, **body.model_dump()))
    return AddressIdResponse(address_id=result)


@address_router.put("/{address_id}", response_model=StatusResponse)
async def update_address(address_id: str, body: UpdateAddressRequest, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(UpdateAddress(customer_id=x_customer_id, address_id=address_id, **body.model_dump(exclude_none=True)))
    return StatusResponse()


@address_router.delete("/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(RemoveAddress(customer_id=x_customer_id, address_id=address_id))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/cod", status_code=201, response_model=OrderIdResponse)
async def place_cod_order(body: CheckoutRequest, x_customer_id: str = Header()) -> OrderIdResponse:
    """Place a cash-on-delivery order from the caller's cart."""
    command = PlaceOrder(
        customer_id=x_customer_id,
        address_id=body.address_id,
        payment_method=PaymentMethod.COD.value,
    )
    result = dispatch(command)
    return OrderIdResponse(order_id=result)


@checkout_router.post("/payment-intents", status_code=201, response_model=PaymentIntentResponse)
async def create_payment_intent(body: CheckoutRequest, x_customer_id: str = Header()) -> PaymentIntentResponse:
    """Open a gateway payment for the caller's cart. Stock is not reserved."""
    result = dispatch(CreatePaymentIntent(customer_id=x_customer_id, address_id=body.address_id))
    return PaymentIntentResponse(**result)


@checkout_router.post("/payment-confirmations", status_code=201, response_model=OrderIdResponse)
async def confirm_payment(body: ConfirmPaymentRequest, x_customer_id: str = Header()) -> OrderIdResponse:
    """Verify a gateway payment and place the paid order."""
    command = ConfirmPayment(
        customer_id=x_customer_id,
        intent_id=body.intent_id,
        payment_id=body.payment_id,
        signature=body.signature,
    )
    result = settle_payment(command)
    return OrderIdResponse(order_id=result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/mine", response_model=list[OrderResponse])
async def my_orders(x_customer_id: str = Header()) -> list[OrderResponse]:
    return [OrderResponse(**order) for order in orders_for_customer(x_customer_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, x_customer_id: str = Header()) -> OrderResponse:
    return OrderResponse(**order_summary(order_for_owner(order_id, x_customer_id)))


@order_router.get("/{order_id}/status", response_model=OrderStatusResponse)
async def order_status(order_id: str, x_customer_id: str = Header()) -> OrderStatusResponse:
    order = order_for_owner(order_id, x_customer_id)
    return OrderStatusResponse(order_id=str(order.id), status=order.status, payment_status=order.payment_status)


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(CancelOrder(order_id=order_id, customer_id=x_customer_id))
    return StatusResponse()


@order_router.put("/{order_id}/return", response_model=StatusResponse)
async def request_return(order_id: str, body: RequestReturnRequest, x_customer_id: str = Header()) -> StatusResponse:
    dispatch(RequestReturn(order_id=order_id, customer_id=x_customer_id, reason=body.reason))
    return StatusResponse()


@order_router.get("/{order_id}/invoice", response_model=InvoiceResponse)
async def order_invoice(order_id: str, x_customer_id: str = Header()) -> InvoiceResponse:
    invoice = build_invoice(order_for_owner(order_id, x_customer_id))
    return InvoiceResponse(
        order_id=invoice.order_id,
        customer_id=invoice.customer_id,
        issued_for=invoice.issued_for,
        currency=invoice.currency,
        payment_method=invoice.payment_method,
        shipping_address=invoice.shipping_address,
        lines=[
            {
                "name": line.name,
                "quantity": line.quantity,
                "price": line.price,
                "line_total": line.line_total,
                "description": line.describe(),
            }
            for line in invoice.lines
        ],
        subtotal=invoice.subtotal,
        cod_fee=invoice.cod_fee,
        tax_amount=invoice.tax_amount,
        total_amount=invoice.total_amount,
        note=invoice.note,
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        category=product.category,
        description=product.description,
        price=product.price,
        original_price=product.original_price,
        images=list(product.images),
        available_quantity=product.available_quantity,
    )


@product_router.get("", response_model=list[ProductResponse])
async def list_products(category: str | None = None) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).listing(category=category)
    return [_product_response(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get_or_none(product_id)
    if product is None:
        raise product_not_found(product_id)
    return _product_response(product)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        images=json.dumps(body.images),
        available_quantity=body.available_quantity,
        category=body.category,
        description=body.description,
        original_price=body.original_price,
    )
    result = dispatch(command)
    return ProductIdResponse(product_id=result)


@admin_router.put("/products/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        price=body.price,
        images=json.dumps(body.images) if body.images is not None else None,
        description=body.description,
    )
    dispatch(command)
    return StatusResponse()


@admin_router.put("/products/{product_id}/stock", response_model=StatusResponse)
async def set_stock(product_id: str, body: SetStockRequest) -> StatusResponse:
    dispatch(SetStock(product_id=product_id, available_quantity=body.available_quantity))
    return StatusResponse()


@admin_router.get("/orders", response_model=list[OrderResponse])
async def list_all_orders() -> list[OrderResponse]:
    return [OrderResponse(**order) for order in all_orders()]


@admin_router.put("/orders/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    dispatch(UpdateOrderStatus(order_id=order_id, status=body.status))
    return StatusResponse()
