"""Tests for the PaymentIntent aggregate."""

import pytest
from storefront.errors import ConflictError, ErrorCode
from storefront.payment.events import PaymentConfirmed, PaymentIntentCreated, PaymentUnfulfilled
from storefront.payment.gateway.port import IntentResult
from storefront.payment.intent import IntentStatus, PaymentIntent


def _open_intent():
    result = IntentResult(
        intent_id="intent_001",
        amount_minor=20000,
        currency="INR",
        receipt="receipt_0001",
        gateway_status="created",
    )
    return PaymentIntent.open(result, customer_id="cust-001", address_id="addr-001", amount=200.0)


class TestPaymentIntent:
    def test_open_records_gateway_intent(self):
        intent = _open_intent()
        assert intent.intent_id == "intent_001"
        assert intent.amount == 200.0
        assert intent.amount_minor == 20000
        assert intent.status == IntentStatus.CREATED.value
        assert isinstance(intent._events[0], PaymentIntentCreated)

    def test_confirm(self):
        intent = _open_intent()
        intent.confirm("pay_001", "ord-001")
        assert intent.is_confirmed() is True
        assert intent.payment_id == "pay_001"
        assert str(intent.order_id) == "ord-001"
        assert isinstance(intent._events[-1], PaymentConfirmed)

    def test_confirm_twice_is_a_duplicate(self):
        intent = _open_intent()
        intent.confirm("pay_001", "ord-001")
        with pytest.raises(ConflictError) as exc:
            intent.confirm("pay_002", "ord-002")
        assert exc.value.code == ErrorCode.DUPLICATE_OPERATION
        assert intent.payment_id == "pay_001"

    def test_belongs_to(self):
        intent = _open_intent()
        assert intent.belongs_to("cust-001") is True
        assert intent.belongs_to("cust-002") is False

    def test_mark_unfulfilled_keeps_payment_id(self):
        intent = _open_intent()
        intent.mark_unfulfilled("pay_001", ErrorCode.INSUFFICIENT_STOCK.value)
        assert intent.status == IntentStatus.UNFULFILLED.value
        assert intent.payment_id == "pay_001"
        assert intent.failure_reason == "InsufficientStock"
        assert intent.is_confirmed() is False
        assert isinstance(intent._events[-1], PaymentUnfulfilled)

    def test_unfulfilled_intent_can_still_be_confirmed(self):
        intent = _open_intent()
        intent.mark_unfulfilled("pay_001", ErrorCode.PAYMENT_AMOUNT_MISMATCH.value)
        intent.confirm("pay_001", "ord-001")
        assert intent.is_confirmed() is True

    def test_confirmed_intent_cannot_be_marked_unfulfilled(self):
        intent = _open_intent()
        intent.confirm("pay_001", "ord-001")
        with pytest.raises(ConflictError):
            intent.mark_unfulfilled("pay_002", ErrorCode.INSUFFICIENT_STOCK.value)
