"""
Payments API: verify the gateway's confirmation for a booking's advance order, and read a
booking's payment status. Mounted under /api/payments.
"""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from turfbook.api.deps import get_current_actor, get_reconciler
from turfbook.core.auth import Actor
from turfbook.db.session import get_db
from turfbook.services.booking_queries import get_payment_status, serialize_booking
from turfbook.services.payment_reconciler import PaymentReconciler

router = APIRouter()


class VerifyPaymentBody(BaseModel):
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


@router.post("/verify")
def verify_payment(
    body: VerifyPaymentBody,
    actor: Actor = Depends(get_current_actor),
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> dict[str, Any]:
    booking = reconciler.verify(body.order_id, body.payment_id, body.signature)
    return {"success": True, "message": "Payment verified successfully", "data": serialize_booking(booking)}


@router.get("/status/{booking_id}")
def payment_status(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    return {"success": True, "data": get_payment_status(db, booking_id, actor)}
