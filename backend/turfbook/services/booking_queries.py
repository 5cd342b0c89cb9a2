"""
Read side for bookings: per-user and per-owner listings, single booking with access
check, payment status. Returns JSON-ready dicts.
"""
from decimal import Decimal

from sqlalchemy.orm import Session

from turfbook.core.auth import Actor
from turfbook.core.errors import Forbidden, NotFound
from turfbook.models.booking import Booking
from turfbook.models.venue import Venue
from turfbook.services.dates import date_to_str
from turfbook.services.venue_lookup import list_owner_venue_ids


def _money(v: Decimal | None) -> float:
    return float(v) if v is not None else 0.0


def serialize_booking(b: Booking) -> dict:
    return {
        "id": b.id,
        "user_id": b.user_id,
        "venue_id": b.venue_id,
        "slot_id": b.slot_id,
        "date": date_to_str(b.date),
        "start_time": b.start_time,
        "end_time": b.end_time,
        "duration_hours": float(b.duration_hours) if b.duration_hours is not None else None,
        "total_amount": _money(b.total_amount),
        "advance_amount": _money(b.advance_amount),
        "remaining_amount": _money(b.remaining_amount),
        "is_advance_paid": bool(b.is_advance_paid),
        "is_full_amount_paid": bool(b.is_full_amount_paid),
        "payment_order_id": b.payment_order_id,
        "payment_transaction_id": b.payment_transaction_id,
        "status": b.status,
        "cancelled_at": b.cancelled_at.isoformat() if b.cancelled_at else None,
        "cancellation_reason": b.cancellation_reason,
        "refund_status": b.refund_status,
        "refund_amount": _money(b.refund_amount),
        "created_at": b.created_at.isoformat() if b.created_at else None,
    }


def list_user_bookings(db: Session, user_id: str) -> list[dict]:
    """Bookings made by user_id, newest first."""
    rows = (
        db.query(Booking)
        .filter(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc())
        .all()
    )
    return [serialize_booking(r) for r in rows]


def list_owner_bookings(db: Session, owner_id: str) -> list[dict]:
    """Bookings on every venue owned by owner_id, newest first."""
    venue_ids = list_owner_venue_ids(db, owner_id)
    if not venue_ids:
        return []
    rows = (
        db.query(Booking)
        .filter(Booking.venue_id.in_(venue_ids))
        .order_by(Booking.created_at.desc())
        .all()
    )
    return [serialize_booking(r) for r in rows]


def list_all_bookings(db: Session) -> list[dict]:
    """Every booking on the platform, newest first. Admin view."""
    rows = db.query(Booking).order_by(Booking.created_at.desc()).all()
    return [serialize_booking(r) for r in rows]


def _load(db: Session, booking_id: str) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFound("Booking not found", booking_id=booking_id)
    return booking


def get_booking_for_actor(db: Session, booking_id: str, actor: Actor) -> dict:
    """Visible to the booking's user, the venue's owner, and admins."""
    booking = _load(db, booking_id)
    if booking.user_id != actor.user_id and not actor.is_admin:
        owner_id = db.query(Venue.owner_id).filter(Venue.id == booking.venue_id).scalar()
        if owner_id != actor.user_id:
            raise Forbidden("Not authorized", booking_id=booking_id)
    return serialize_booking(booking)


def get_payment_status(db: Session, booking_id: str, actor: Actor) -> dict:
    booking = _load(db, booking_id)
    if booking.user_id != actor.user_id and not actor.is_admin:
        raise Forbidden("Not authorized", booking_id=booking_id)
    return {
        "status": booking.status,
        "payment_id": booking.payment_transaction_id,
        "is_advance_paid": bool(booking.is_advance_paid),
        "amount": _money(booking.total_amount),
        "advance_amount": _money(booking.advance_amount),
        "booking": serialize_booking(booking),
    }
