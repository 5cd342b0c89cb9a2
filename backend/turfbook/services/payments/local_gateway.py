"""
Offline order service for development and tests: mints order ids locally and keeps the
orders in memory. Used when no payment key id is configured.
"""
import uuid
from typing import Any

from turfbook.services.payments.types import PaymentOrder


class LocalOrderGateway:
    gateway_id = "local"

    def __init__(self) -> None:
        self.orders: dict[str, dict[str, Any]] = {}

    def create_order(self, amount_minor: int, currency: str, metadata: dict[str, Any]) -> PaymentOrder:
        order = PaymentOrder(order_id=f"order_{uuid.uuid4().hex[:14]}", amount=amount_minor, currency=currency)
        self.orders[order.order_id] = {"amount": amount_minor, "currency": currency, "notes": dict(metadata)}
        return order
