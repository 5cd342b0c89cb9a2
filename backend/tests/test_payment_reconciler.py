from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import DAY, PAYMENT_SECRET, slots_for
from turfbook.core.auth import Actor
from turfbook.core.constants import (
    REASON_PAYMENT_EXPIRED,
    REASON_VERIFICATION_FAILED,
    REFUND_NONE,
    REFUND_PENDING,
    ROLE_ADMIN,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
)
from turfbook.core.errors import Forbidden, InvalidState, NotFound, PaymentRejected
from turfbook.models.booking import Booking
from turfbook.scheduler.pending_expiry_job import run_expire_pending_bookings_job
from turfbook.services.payments import compute_signature
from turfbook.services.reservation_service import ReservationOrchestrator, TimeRange

USER = Actor("user-1")


@pytest.fixture
def pending(db, venue, orchestrator):
    booking, _ = orchestrator.create_booking(USER.user_id, venue.id, DAY, TimeRange("10:00", "12:00"))
    return booking


def _pay(reconciler, booking, transaction_id="pay_1"):
    sig = compute_signature(booking.payment_order_id, transaction_id, PAYMENT_SECRET)
    return reconciler.verify(booking.payment_order_id, transaction_id, sig)


def test_signature_is_hmac_sha256_hex():
    sig = compute_signature("order_1", "pay_1", "secret")
    assert len(sig) == 64
    assert sig == compute_signature("order_1", "pay_1", "secret")
    assert sig != compute_signature("order_1", "pay_2", "secret")


def test_verify_success_confirms(db, venue, pending, reconciler):
    booking = _pay(reconciler, pending)
    assert booking.status == STATUS_CONFIRMED
    assert booking.is_advance_paid is True
    assert booking.is_full_amount_paid is False
    assert booking.payment_transaction_id == "pay_1"
    assert all(s.is_booked for s in slots_for(db, venue.id).values())


def test_verify_bad_signature_cancels_and_releases(db, venue, pending, reconciler):
    with pytest.raises(PaymentRejected):
        reconciler.verify(pending.payment_order_id, "pay_1", "0" * 64)

    db.expire_all()
    booking = db.get(Booking, pending.id)
    assert booking.status == STATUS_CANCELLED
    assert booking.cancellation_reason == REASON_VERIFICATION_FAILED
    assert booking.cancelled_at is not None
    slots = slots_for(db, venue.id)
    assert len(slots) == 4
    assert not any(s.is_booked or s.booking_id for s in slots.values())


def test_verify_unknown_order(reconciler):
    with pytest.raises(NotFound):
        reconciler.verify("order_missing", "pay_1", "sig")


def test_verify_replay_is_idempotent(pending, reconciler):
    _pay(reconciler, pending)
    again = _pay(reconciler, pending)
    assert again.status == STATUS_CONFIRMED


def test_verify_after_cancel_is_invalid_state(pending, reconciler):
    reconciler.cancel(pending.id, USER)
    with pytest.raises(InvalidState):
        _pay(reconciler, pending)


def test_cancel_pending_releases_every_slot(db, venue, pending, reconciler):
    booking = reconciler.cancel(pending.id, USER, "Plans changed")
    assert booking.status == STATUS_CANCELLED
    assert booking.cancellation_reason == "Plans changed"
    assert booking.refund_status == REFUND_NONE
    assert not any(s.is_booked for s in slots_for(db, venue.id).values())


def test_cancel_default_reason(pending, reconciler):
    assert reconciler.cancel(pending.id, USER).cancellation_reason == "Cancelled by user"


def test_cancel_confirmed_marks_refund_pending(pending, reconciler):
    _pay(reconciler, pending)
    booking = reconciler.cancel(pending.id, USER)
    assert booking.refund_status == REFUND_PENDING
    assert booking.refund_amount == Decimal("2000")


def test_cancel_requires_owner_or_admin(pending, reconciler):
    with pytest.raises(Forbidden):
        reconciler.cancel(pending.id, Actor("someone-else"))
    booking = reconciler.cancel(pending.id, Actor("admin-1", ROLE_ADMIN))
    assert booking.status == STATUS_CANCELLED


def test_cancel_missing_booking(reconciler):
    with pytest.raises(NotFound):
        reconciler.cancel("missing", USER)


def test_cancel_twice_has_no_side_effects(db, venue, pending, reconciler, orchestrator):
    reconciler.cancel(pending.id, USER)
    rebooked, _ = orchestrator.create_booking("user-2", venue.id, DAY, TimeRange("10:00", "11:00"))

    with pytest.raises(InvalidState):
        reconciler.cancel(pending.id, USER)

    slots = slots_for(db, venue.id)
    assert slots["10:00"].booking_id == rebooked.id and slots["10:00"].is_booked
    assert slots["10:30"].booking_id == rebooked.id and slots["10:30"].is_booked


def test_cancel_completed_is_refused(db, venue, pending, reconciler):
    _pay(reconciler, pending)
    pending.status = STATUS_COMPLETED
    db.commit()

    with pytest.raises(InvalidState):
        reconciler.cancel(pending.id, USER)
    assert all(s.booking_id == pending.id for s in slots_for(db, venue.id).values())
    db.expire_all()
    assert db.get(Booking, pending.id).status == STATUS_COMPLETED


def test_expire_pending_only_touches_stale_bookings(db, venue, gateway, reconciler):
    now = datetime.now(timezone.utc)
    old = ReservationOrchestrator(db, gateway, clock=lambda: now - timedelta(hours=2))
    fresh = ReservationOrchestrator(db, gateway, clock=lambda: now)
    stale, _ = old.create_booking("user-1", venue.id, DAY, TimeRange("08:00", "09:00"))
    recent, _ = fresh.create_booking("user-2", venue.id, DAY, TimeRange("09:00", "10:00"))

    assert reconciler.expire_pending(now - timedelta(hours=1)) == 1

    db.expire_all()
    assert db.get(Booking, stale.id).status == STATUS_CANCELLED
    assert db.get(Booking, stale.id).cancellation_reason == REASON_PAYMENT_EXPIRED
    assert db.get(Booking, recent.id).status == STATUS_PENDING
    slots = slots_for(db, venue.id)
    assert not slots["08:00"].is_booked and not slots["08:30"].is_booked
    assert slots["09:00"].booking_id == recent.id


def test_expiry_job_disabled_with_zero_ttl(session_factory):
    assert run_expire_pending_bookings_job(ttl_minutes=0, session_factory=session_factory) == 0


def test_expiry_job_runs_sweep(db, venue, gateway, session_factory):
    long_ago = datetime.now(timezone.utc) - timedelta(days=1)
    booking, _ = ReservationOrchestrator(db, gateway, clock=lambda: long_ago).create_booking(
        "user-1", venue.id, DAY, TimeRange("08:00", "09:00")
    )
    assert run_expire_pending_bookings_job(ttl_minutes=30, session_factory=session_factory) == 1
    db.expire_all()
    assert db.get(Booking, booking.id).status == STATUS_CANCELLED
