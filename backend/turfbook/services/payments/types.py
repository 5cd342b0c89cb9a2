"""Normalized payment-order shape returned by every gateway."""
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentOrder:
    order_id: str
    amount: int  # minor units (paise for INR)
    currency: str

    def to_dict(self) -> dict:
        return {"id": self.order_id, "amount": self.amount, "currency": self.currency}
