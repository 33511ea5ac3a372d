"""Hosted payment gateway adapter.

Opens payment intents through the gateway's REST API (``POST /orders`` with
HTTP basic auth using the merchant key id and secret) and verifies payment
confirmations locally against the same secret.
"""

import httpx

from storefront.domain import logger
from storefront.errors import ErrorCode, ExternalServiceError
from storefront.payment.gateway.port import IntentResult, PaymentGateway
from storefront.payment.gateway.signature import signature_matches

_INTENT_ENDPOINT = "/orders"


class HostedGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_base_url: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self._client = client or httpx.Client(
            base_url=api_base_url,
            auth=(key_id, key_secret),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout),
        )

    def create_payment_intent(self, amount_minor: int, currency: str, receipt: str) -> IntentResult:
        payload = {"amount": amount_minor, "currency": currency, "receipt": receipt}
        try:
            response = self._client.post(_INTENT_ENDPOINT, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Gateway rejected payment intent",
                status_code=exc.response.status_code,
                receipt=receipt,
            )
            raise ExternalServiceError(
                ErrorCode.GATEWAY_FAILURE,
                "Payment gateway rejected the request.",
                gateway_status=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Payment gateway unreachable", error=str(exc), receipt=receipt)
            raise ExternalServiceError(ErrorCode.GATEWAY_FAILURE, "Payment gateway is unreachable.") from exc

        body = response.json()
        return IntentResult(
            intent_id=body["id"],
            amount_minor=int(body.get("amount", amount_minor)),
            currency=body.get("currency", currency),
            receipt=body.get("receipt", receipt),
            gateway_status=body.get("status"),
        )

    def verify_confirmation(self, intent_id: str, payment_id: str, signature: str) -> bool:
        return signature_matches(self.key_secret, intent_id, payment_id, signature)

    def close(self) -> None:
        self._client.close()
