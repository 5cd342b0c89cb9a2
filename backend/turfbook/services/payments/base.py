"""Protocol for payment-order services. Gateways differ only in how the order is created."""
from typing import Any, Protocol

from turfbook.services.payments.types import PaymentOrder


class PaymentGateway(Protocol):
    @property
    def gateway_id(self) -> str:
        """Short id ('razorpay', 'local') for logs."""
        ...

    def create_order(self, amount_minor: int, currency: str, metadata: dict[str, Any]) -> PaymentOrder:
        """
        Open an order the client will pay against. metadata is attached to the order
        (booking context) for later reconciliation. Raises PaymentGatewayError on failure.
        """
        ...
