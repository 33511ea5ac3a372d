"""HMAC signatures over payment confirmations.

The gateway signs ``"<intent_id>|<payment_id>"`` with the merchant secret
using HMAC-SHA256 and sends the hex digest along with the confirmation.
"""

import hashlib
import hmac


def sign_confirmation(secret: str, intent_id: str, payment_id: str) -> str:
    message = f"{intent_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signature_matches(secret: str, intent_id: str, payment_id: str, signature: str | None) -> bool:
    if not signature:
        return False
    expected = sign_confirmation(secret, intent_id, payment_id)
    return hmac.compare_digest(expected, signature)
