"""
Bookings API: create (claim slots + open advance payment order), list, get, cancel.

All routes require a bearer token. Mounted under /api/bookings.
"""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from turfbook.api.deps import get_current_actor, get_orchestrator, get_reconciler, require_owner_or_admin
from turfbook.core.auth import Actor
from turfbook.db.session import get_db
from turfbook.services.booking_queries import (
    get_booking_for_actor,
    list_owner_bookings,
    list_user_bookings,
    serialize_booking,
)
from turfbook.services.payment_reconciler import PaymentReconciler
from turfbook.services.reservation_service import (
    BookingRequest,
    LegacySlot,
    ReservationOrchestrator,
    TimeRange,
)

router = APIRouter()


class CreateBookingBody(BaseModel):
    venue_id: str = Field(..., min_length=1)
    date: str = Field(..., description="YYYY-MM-DD")
    start_time: str | None = Field(None, description="HH:MM, with end_time")
    end_time: str | None = None
    time: str | None = Field(None, description="Legacy: HH:MM, with duration")
    duration: float | None = Field(None, description="Legacy: hours, multiple of 0.5")

    def to_request(self) -> BookingRequest | None:
        if self.start_time and self.end_time:
            return TimeRange(start_time=self.start_time, end_time=self.end_time)
        if self.time and self.duration is not None:
            return LegacySlot(time=self.time, duration_hours=self.duration)
        return None


class CancelBody(BaseModel):
    reason: str | None = Field(None, max_length=500)


@router.post("", status_code=201)
def create_booking(
    body: CreateBookingBody,
    actor: Actor = Depends(get_current_actor),
    orchestrator: ReservationOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Reserve a time range; returns the pending booking and the payment order to complete."""
    booking, order = orchestrator.create_booking(actor.user_id, body.venue_id, body.date, body.to_request())
    return {"success": True, "data": serialize_booking(booking), "payment_order": order.to_dict()}


@router.get("")
def my_bookings(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    rows = list_user_bookings(db, actor.user_id)
    return {"success": True, "count": len(rows), "data": rows}


@router.get("/owner/my-bookings")
def owner_bookings(
    actor: Actor = Depends(require_owner_or_admin),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Bookings on the caller's venues."""
    rows = list_owner_bookings(db, actor.user_id)
    return {"success": True, "count": len(rows), "data": rows}


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    return {"success": True, "data": get_booking_for_actor(db, booking_id, actor)}


@router.put("/{booking_id}/cancel")
def cancel_booking(
    booking_id: str,
    body: CancelBody | None = None,
    actor: Actor = Depends(get_current_actor),
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> dict[str, Any]:
    booking = reconciler.cancel(booking_id, actor, body.reason if body else None)
    return {"success": True, "data": serialize_booking(booking), "message": "Booking cancelled successfully"}
