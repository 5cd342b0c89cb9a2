"""Razorpay orders through the official SDK: sends the request and normalizes the reply."""
import logging
import time
from typing import Any

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError

from turfbook.core.errors import PaymentGatewayError
from turfbook.services.payments.types import PaymentOrder

logger = logging.getLogger(__name__)


class RazorpayGateway:
    """Creates advance-payment orders. Notes values must be strings (Razorpay limit)."""

    gateway_id = "razorpay"

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        *,
        base_url: str | None = None,
        client: razorpay.Client | None = None,
    ) -> None:
        if client is None:
            options = {"base_url": base_url.rstrip("/")} if base_url else {}
            client = razorpay.Client(auth=(key_id, key_secret), **options)
        self._client = client

    def create_order(self, amount_minor: int, currency: str, metadata: dict[str, Any]) -> PaymentOrder:
        body = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": f"booking_advance_{int(time.time() * 1000)}",
            "notes": {k: "" if v is None else str(v) for k, v in metadata.items()},
        }
        try:
            data = self._client.order.create(body)
        except (BadRequestError, GatewayError, ServerError) as e:
            logger.warning("Order creation rejected: %s", e)
            raise PaymentGatewayError(f"Payment provider error: {e}") from e
        except requests.RequestException as e:
            raise PaymentGatewayError(f"Payment provider unreachable: {e}") from e
        except ValueError as e:
            raise PaymentGatewayError("Payment provider returned invalid JSON") from e
        if not isinstance(data, dict):
            logger.warning("Order creation returned %s instead of an object", type(data).__name__)
            raise PaymentGatewayError("Payment provider returned a malformed order")
        if not data.get("id"):
            raise PaymentGatewayError("Payment provider returned no order id")
        return PaymentOrder(
            order_id=data["id"],
            amount=int(data.get("amount", amount_minor)),
            currency=data.get("currency", currency),
        )
