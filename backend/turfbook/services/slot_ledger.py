"""
Slot ledger: per (venue, day, half-hour) availability records.

A missing record means "never instantiated" and counts as available. claim() is the only
authoritative availability check: it is a single conditional write (UPDATE guarded by the
free state, or INSERT guarded by the unique constraint), so two racing claims on one key
produce exactly one winner. Functions here flush but never commit; callers own the
transaction boundaries.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from turfbook.core.errors import Conflict
from turfbook.models.booking import Booking
from turfbook.models.slot import Slot
from turfbook.services.dates import date_range, day_range
from turfbook.services.time_grid import enumerate_keys, operating_window, parse_end_time, parse_time
from turfbook.services.venue_lookup import VenueInfo

logger = logging.getLogger(__name__)


def _day_query(db: Session, venue_id: str, day: datetime):
    start, end = day_range(day)
    return db.query(Slot).filter(Slot.venue_id == venue_id, Slot.date >= start, Slot.date < end)


def find_slots(db: Session, venue_id: str, day: datetime, time_keys: list[str]) -> list[Slot]:
    """Existing records among the requested keys (advisory read; may be stale by the time of claim)."""
    if not time_keys:
        return []
    return _day_query(db, venue_id, day).filter(Slot.time.in_(time_keys)).all()


def claim(db: Session, venue_id: str, day: datetime, time_key: str, booking_id: str) -> Slot:
    """
    Mark one slot booked for booking_id, creating the record if absent.
    Raises Conflict if the slot is booked or blocked at claim time, or if a concurrent
    claim inserted it first.
    """
    key_q = _day_query(db, venue_id, day).filter(Slot.time == time_key)
    updated = (
        key_q.filter(Slot.is_booked.is_(False), Slot.is_blocked.is_(False))
        .update({Slot.is_booked: True, Slot.booking_id: booking_id}, synchronize_session=False)
    )
    if updated:
        return key_q.populate_existing().one()

    existing = key_q.populate_existing().first()
    if existing is not None:
        raise Conflict(
            f"Slot {time_key} was just taken",
            time=time_key,
            reason="blocked" if existing.is_blocked else "booked",
        )

    slot = Slot(venue_id=venue_id, date=day, time=time_key, is_booked=True, booking_id=booking_id)
    try:
        with db.begin_nested():
            db.add(slot)
    except IntegrityError:
        logger.warning("Claim race lost on insert: venue=%s day=%s time=%s", venue_id, day, time_key)
        raise Conflict(f"Slot {time_key} was just taken", time=time_key, reason="booked") from None
    return slot


def release(db: Session, slot_id: str, booking_id: str | None = None) -> None:
    """
    Free a slot (is_booked=False, booking_id=None). Idempotent. With booking_id, only a slot
    still held by that booking is touched.
    """
    q = db.query(Slot).filter(Slot.id == slot_id)
    if booking_id is not None:
        q = q.filter(Slot.booking_id == booking_id)
    q.update({Slot.is_booked: False, Slot.booking_id: None}, synchronize_session=False)


def release_many(db: Session, slot_ids: list[str], booking_id: str) -> int:
    if not slot_ids:
        return 0
    return (
        db.query(Slot)
        .filter(Slot.id.in_(slot_ids), Slot.booking_id == booking_id)
        .update({Slot.is_booked: False, Slot.booking_id: None}, synchronize_session=False)
    )


def booking_time_keys(booking: Booking) -> list[str]:
    """Slot keys a booking claimed, recomputed from its range (legacy rows: start key only)."""
    if not booking.end_time:
        return [booking.start_time]
    return enumerate_keys(parse_time(booking.start_time), parse_end_time(booking.end_time))


def release_for_booking(db: Session, booking: Booking) -> int:
    """Release the primary slot and every slot in the booking's range still held by it."""
    keys = booking_time_keys(booking)
    released = (
        _day_query(db, booking.venue_id, booking.date)
        .filter(Slot.time.in_(keys), Slot.booking_id == booking.id)
        .update({Slot.is_booked: False, Slot.booking_id: None}, synchronize_session=False)
    )
    if booking.slot_id:
        release(db, booking.slot_id, booking_id=booking.id)
    return released


def list_available_slots(
    db: Session,
    venue: VenueInfo,
    date_str: str,
    *,
    default_open: str,
    default_close: str,
) -> list[dict]:
    """
    Full-day availability: slot records overlaid on the venue's operating-hours grid.
    Keys without a record are reported as free.
    """
    start, end = date_range(date_str)
    rows = (
        db.query(Slot)
        .filter(Slot.venue_id == venue.id, Slot.date >= start, Slot.date < end)
        .all()
    )
    by_time = {r.time: r for r in rows}
    open_min, close_min = operating_window(venue.open_time, venue.close_time, default_open, default_close)
    out = []
    for key in enumerate_keys(open_min, close_min):
        slot = by_time.get(key)
        out.append(
            {
                "time": key,
                "is_booked": bool(slot.is_booked) if slot else False,
                "is_blocked": bool(slot.is_blocked) if slot else False,
                "slot_id": slot.id if slot else None,
            }
        )
    booked = sum(1 for s in out if s["is_booked"])
    logger.debug("Slots for venue=%s date=%s: %s total, %s booked", venue.id, date_str, len(out), booked)
    return out
