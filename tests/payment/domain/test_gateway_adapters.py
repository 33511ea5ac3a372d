"""Tests for the payment gateway port, its adapters and confirmation signatures."""

import hashlib
import hmac
import json

import httpx
import pytest
from storefront.errors import ErrorCode, ExternalServiceError
from storefront.payment.gateway import get_gateway, reset_gateway, set_gateway
from storefront.payment.gateway.fake_adapter import FakeGateway
from storefront.payment.gateway.hosted_adapter import HostedGateway
from storefront.payment.gateway.port import IntentResult
from storefront.payment.gateway.signature import sign_confirmation, signature_matches

SECRET = "whsec-test"


class TestSignature:
    def test_signature_round_trip(self):
        signature = sign_confirmation(SECRET, "intent_001", "pay_001")
        assert signature_matches(SECRET, "intent_001", "pay_001", signature) is True

    def test_signs_intent_and_payment_with_hmac_sha256(self):
        expected = hmac.new(b"key", b"a|b", hashlib.sha256).hexdigest()
        assert sign_confirmation("key", "a", "b") == expected

    def test_tampered_payment_id(self):
        signature = sign_confirmation(SECRET, "intent_001", "pay_001")
        assert signature_matches(SECRET, "intent_001", "pay_002", signature) is False

    def test_wrong_secret(self):
        signature = sign_confirmation("other-secret", "intent_001", "pay_001")
        assert signature_matches(SECRET, "intent_001", "pay_001", signature) is False

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature(self, signature):
        assert signature_matches(SECRET, "intent_001", "pay_001", signature) is False


class TestFakeGateway:
    def test_create_payment_intent(self):
        gateway = FakeGateway(secret=SECRET)
        result = gateway.create_payment_intent(amount_minor=24000, currency="INR", receipt="receipt_abc")
        assert isinstance(result, IntentResult)
        assert result.intent_id.startswith("fake_intent_")
        assert result.amount_minor == 24000
        assert result.gateway_status == "created"
        assert gateway.calls[0]["method"] == "create_payment_intent"

    def test_configured_failure(self):
        gateway = FakeGateway(secret=SECRET)
        gateway.configure(should_succeed=False, failure_reason="Gateway down for maintenance")
        with pytest.raises(ExternalServiceError) as exc:
            gateway.create_payment_intent(amount_minor=100, currency="INR", receipt="receipt_abc")
        assert exc.value.code == ErrorCode.GATEWAY_FAILURE
        assert exc.value.message == "Gateway down for maintenance"
        assert exc.value.status_code == 502

    def test_verify_confirmation(self):
        gateway = FakeGateway(secret=SECRET)
        signature = sign_confirmation(SECRET, "intent_001", "pay_001")
        assert gateway.verify_confirmation("intent_001", "pay_001", signature) is True
        assert gateway.verify_confirmation("intent_001", "pay_001", "forged") is False
        assert [call["method"] for call in gateway.calls] == ["verify_confirmation", "verify_confirmation"]


def _hosted(handler):
    client = httpx.Client(base_url="https://gateway.test/v1", transport=httpx.MockTransport(handler))
    return HostedGateway(key_id="key_id", key_secret=SECRET, api_base_url="https://gateway.test/v1", client=client)


class TestHostedGateway:
    def test_create_payment_intent_posts_order(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"id": "order_Hx1", "amount": 24000, "currency": "INR", "receipt": "receipt_abc", "status": "created"},
            )

        result = _hosted(handler).create_payment_intent(amount_minor=24000, currency="INR", receipt="receipt_abc")

        assert seen["path"] == "/v1/orders"
        assert seen["body"] == {"amount": 24000, "currency": "INR", "receipt": "receipt_abc"}
        assert result == IntentResult(
            intent_id="order_Hx1",
            amount_minor=24000,
            currency="INR",
            receipt="receipt_abc",
            gateway_status="created",
        )

    def test_rejected_request(self):
        gateway = _hosted(lambda request: httpx.Response(401, json={"error": "unauthorized"}))
        with pytest.raises(ExternalServiceError) as exc:
            gateway.create_payment_intent(amount_minor=100, currency="INR", receipt="receipt_abc")
        assert exc.value.code == ErrorCode.GATEWAY_FAILURE
        assert exc.value.details["gateway_status"] == 401

    def test_unreachable_gateway(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError) as exc:
            _hosted(handler).create_payment_intent(amount_minor=100, currency="INR", receipt="receipt_abc")
        assert exc.value.code == ErrorCode.GATEWAY_FAILURE

    def test_verify_confirmation_uses_key_secret(self):
        gateway = _hosted(lambda request: httpx.Response(500))
        signature = sign_confirmation(SECRET, "order_Hx1", "pay_001")
        assert gateway.verify_confirmation("order_Hx1", "pay_001", signature) is True
        assert gateway.verify_confirmation("order_Hx1", "pay_002", signature) is False


class TestGatewaySelection:
    def test_default_gateway_is_fake_in_tests(self):
        assert isinstance(get_gateway(), FakeGateway)

    def test_set_and_reset(self):
        custom = FakeGateway(secret="custom")
        set_gateway(custom)
        assert get_gateway() is custom
        reset_gateway()
        assert get_gateway() is not custom

    def test_replacing_hosted_gateway_closes_its_client(self):
        client = httpx.Client(base_url="https://gateway.test/v1", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        hosted = HostedGateway(key_id="key_id", key_secret=SECRET, api_base_url="https://gateway.test/v1", client=client)
        set_gateway(hosted)
        set_gateway(hosted)
        assert client.is_closed is False

        set_gateway(FakeGateway(secret=SECRET))
        assert client.is_closed is True

    def test_reset_closes_hosted_gateway(self):
        client = httpx.Client(base_url="https://gateway.test/v1", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        set_gateway(HostedGateway(key_id="key_id", key_secret=SECRET, api_base_url="https://gateway.test/v1", client=client))

        reset_gateway()

        assert client.is_closed is True
