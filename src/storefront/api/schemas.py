"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the Protean commands they
are translated into.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class OrderIdResponse(BaseModel):
    order_id: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=0)


class CartLineResponse(BaseModel):
    product_id: str
    name: str
    price: float
    image: str | None = None
    quantity: int
    available_quantity: int
    line_total: float


class CartResponse(BaseModel):
    customer_id: str
    items: list[CartLineResponse]
    item_count: int
    subtotal: float


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
class AddressRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    mobile: str = Field(min_length=1, max_length=20)
    pincode: str = Field(min_length=1, max_length=10)
    locality: str | None = None
    address: str = Field(min_length=1, max_length=500)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    address_type: str = "Home"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Asha Rao",
                    "mobile": "9876543210",
                    "pincode": "560001",
                    "locality": "MG Road",
                    "address": "12, Residency Road",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "address_type": "Home",
                }
            ]
        }
    }


class UpdateAddressRequest(BaseModel):
    name: str | None = None
    mobile: str | None = None
    pincode: str | None = None
    locality: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    address_type: str | None = None


class AddressIdResponse(BaseModel):
    address_id: str


class SavedAddressResponse(BaseModel):
    address_id: str
    name: str
    mobile: str
    pincode: str
    locality: str | None = None
    address: str
    city: str
    state: str
    address_type: str | None = None


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    address_id: str


class PaymentIntentResponse(BaseModel):
    intent_id: str
    amount: float
    amount_minor: int
    currency: str
    receipt: str
    key_id: str


class ConfirmPaymentRequest(BaseModel):
    intent_id: str
    payment_id: str
    signature: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    price: float
    image: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    items: list[OrderItemResponse]
    shipping_address: dict | None = None
    subtotal: float
    cod_fee: float
    tax_amount: float
    total_amount: float
    currency: str
    payment_method: str
    payment_status: str
    transaction_ref: str | None = None
    return_reason: str | None = None
    created_at: str | None = None


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str
    payment_status: str


class RequestReturnRequest(BaseModel):
    reason: str | None = None


class InvoiceLineResponse(BaseModel):
    name: str
    quantity: int
    price: float
    line_total: float
    description: str


class InvoiceResponse(BaseModel):
    order_id: str
    customer_id: str
    issued_for: str
    currency: str
    payment_method: str
    shipping_address: dict
    lines: list[InvoiceLineResponse]
    subtotal: float
    cod_fee: float
    tax_amount: float
    total_amount: float
    note: str


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    images: list[str] = Field(min_length=1)
    available_quantity: int = Field(ge=0, default=0)
    category: str | None = None
    description: str | None = None
    original_price: float | None = Field(default=None, ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = None
    price: float | None = Field(default=None, ge=0)
    images: list[str] | None = None
    description: str | None = None


class SetStockRequest(BaseModel):
    available_quantity: int = Field(ge=0)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    category: str | None = None
    description: str | None = None
    price: float
    original_price: float | None = None
    images: list[str]
    available_quantity: int


class UpdateOrderStatusRequest(BaseModel):
    status: str
