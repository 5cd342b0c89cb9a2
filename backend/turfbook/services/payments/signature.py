"""
Payment confirmation signatures: hex HMAC-SHA256 over "{order_id}|{transaction_id}".

Verification goes through the Razorpay SDK utility. compute_signature produces the same
value for orders opened by the local gateway.
"""
import hashlib
import hmac
from functools import lru_cache

import razorpay
from razorpay.errors import SignatureVerificationError


def compute_signature(order_id: str, transaction_id: str, secret: str) -> str:
    message = f"{order_id}|{transaction_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


@lru_cache(maxsize=8)
def _utility(secret: str):
    return razorpay.Client(auth=("", secret)).utility


def signature_matches(order_id: str, transaction_id: str, signature: str, secret: str) -> bool:
    if not signature:
        return False
    try:
        return bool(
            _utility(secret).verify_payment_signature(
                {
                    "razorpay_order_id": order_id,
                    "razorpay_payment_id": transaction_id,
                    "razorpay_signature": signature,
                }
            )
        )
    except SignatureVerificationError:
        return False
