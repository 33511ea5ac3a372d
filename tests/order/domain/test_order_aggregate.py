"""Tests for the Order aggregate — placement snapshot and state machine."""

from datetime import UTC, datetime, timedelta

import pytest
from storefront.checkout.pricing import OrderCharges
from storefront.errors import ErrorCode, InvalidRequestError, InvalidTransitionError
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged, ReturnRequested
from storefront.order.order import Order, OrderStatus, PaymentMethod, PaymentStatus

_ADDRESS = {
    "name": "Asha Rao",
    "mobile": "9876543210",
    "pincode": "560001",
    "locality": "MG Road",
    "address": "12, Residency Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "address_type": "Home",
}


def _make_order(status=None):
    order = Order.place(
        customer_id="cust-001",
        lines=[
            {"product_id": "prod-001", "name": "Kurta", "quantity": 2, "price": 100.0, "image": "k.jpg"},
            {"product_id": "prod-002", "name": "Dupatta", "quantity": 1, "price": 50.0, "image": "d.jpg"},
        ],
        shipping_address=_ADDRESS,
        charges=OrderCharges(subtotal=250.0, cod_fee=40.0, tax_amount=0.0, total_amount=290.0),
        payment_method=PaymentMethod.COD,
        payment_status=PaymentStatus.PENDING_COD,
    )
    if status is not None:
        order.status = status.value
    order._events.clear()
    return order


class TestPlaceOrder:
    def test_place_snapshots_lines_and_address(self):
        order = _make_order()
        assert order.status == OrderStatus.PROCESSING.value
        assert [item.name for item in order.items] == ["Kurta", "Dupatta"]
        assert order.shipping_address.city == "Bengaluru"
        assert order.total_amount == 290.0
        assert order.payment_status == "Pending (COD)"

    def test_place_raises_order_placed(self):
        order = Order.place(
            customer_id="cust-001",
            lines=[{"product_id": "prod-001", "name": "Kurta", "quantity": 3, "price": 10.0, "image": None}],
            shipping_address=_ADDRESS,
            charges=OrderCharges(subtotal=30.0, cod_fee=0.0, tax_amount=0.0, total_amount=30.0),
            payment_method=PaymentMethod.GATEWAY,
            payment_status=PaymentStatus.PAID,
            transaction_ref="pay_123",
        )
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.item_count == 3
        assert event.payment_status == "Paid"
        assert order.transaction_ref == "pay_123"

    def test_belongs_to(self):
        order = _make_order()
        assert order.belongs_to("cust-001") is True
        assert order.belongs_to("cust-002") is False


class TestCancel:
    def test_cancel_processing_order(self):
        order = _make_order()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED.value

    def test_cancel_raises_event_with_restocked_lines(self):
        order = _make_order()
        order.cancel()
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert '"quantity": 2' in event.restocked_items

    @pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_only_processing_orders_can_be_cancelled(self, status):
        order = _make_order(status)
        with pytest.raises(InvalidTransitionError) as exc:
            order.cancel()
        assert exc.value.code == ErrorCode.INVALID_TRANSITION
        assert order.status == status.value
        assert order._events == []

    def test_cancellation_window(self):
        order = _make_order()
        later = order.created_at + timedelta(hours=25)
        with pytest.raises(InvalidTransitionError):
            order.cancel(window_hours=24, now=later)
        assert order.status == OrderStatus.PROCESSING.value

    def test_cancellation_inside_window(self):
        order = _make_order()
        order.cancel(window_hours=24, now=datetime.now(UTC))
        assert order.status == OrderStatus.CANCELLED.value


class TestRequestReturn:
    def test_return_delivered_order(self):
        order = _make_order(OrderStatus.DELIVERED)
        order.request_return("  Wrong size  ")
        assert order.status == OrderStatus.RETURN_REQUESTED.value
        assert order.return_reason == "Wrong size"
        assert isinstance(order._events[-1], ReturnRequested)

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_reason_is_required(self, reason):
        order = _make_order(OrderStatus.DELIVERED)
        with pytest.raises(InvalidRequestError) as exc:
            order.request_return(reason)
        assert exc.value.code == ErrorCode.REASON_REQUIRED
        assert order.status == OrderStatus.DELIVERED.value

    def test_cannot_return_undelivered_order(self):
        order = _make_order()
        with pytest.raises(InvalidTransitionError):
            order.request_return("Changed my mind")


class TestOverrideStatus:
    def test_override_ignores_state_machine(self):
        order = _make_order(OrderStatus.CANCELLED)
        order.override_status("Delivered")
        assert order.status == OrderStatus.DELIVERED.value
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "Cancelled"

    def test_unknown_status_is_rejected(self):
        order = _make_order()
        with pytest.raises(InvalidRequestError) as exc:
            order.override_status("Lost")
        assert exc.value.code == ErrorCode.UNKNOWN_STATUS
        assert "Return Requested" in exc.value.details["allowed"]
        assert order.status == OrderStatus.PROCESSING.value
