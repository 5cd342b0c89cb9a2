"""
Payment reconciliation: match an external payment confirmation to a pending booking and
finalize it, and handle cancellation (including the pending-payment expiry sweep).

Booking.status transitions owned here:
  pending   -> confirmed  (verify, signature ok)
  pending   -> cancelled  (verify, signature mismatch; cancel; expiry)
  confirmed -> cancelled  (cancel)
Nothing leaves cancelled or completed.
"""
import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session

from turfbook.core.auth import Actor
from turfbook.core.constants import (
    REASON_DEFAULT_CANCEL,
    REASON_PAYMENT_EXPIRED,
    REASON_VERIFICATION_FAILED,
    REFUND_PENDING,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
)
from turfbook.core.errors import Forbidden, InvalidState, NotFound, PaymentRejected
from turfbook.models.booking import Booking
from turfbook.services import slot_ledger
from turfbook.services.payments import signature_matches

logger = logging.getLogger(__name__)


class PaymentReconciler:
    def __init__(
        self,
        db: Session,
        payment_secret: str,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db = db
        self._secret = payment_secret
        self._now = clock or (lambda: datetime.now(timezone.utc))

    def verify(self, order_id: str, transaction_id: str, signature: str) -> Booking:
        """
        Confirm the booking paid through order_id. A bad signature cancels the booking and
        frees its slots (terminal for this attempt) and raises PaymentRejected.
        """
        db = self._db
        booking = db.query(Booking).filter(Booking.payment_order_id == order_id).first()
        if not booking:
            raise NotFound("Booking not found", order_id=order_id)

        valid = signature_matches(order_id, transaction_id, signature, self._secret)

        if booking.status != STATUS_PENDING:
            # Replayed confirmation of the same payment is harmless
            if valid and booking.status == STATUS_CONFIRMED and booking.payment_transaction_id == transaction_id:
                return booking
            raise InvalidState(
                f"Booking is {booking.status}; payment cannot be verified",
                booking_id=booking.id,
                status=booking.status,
            )

        if not valid:
            released = slot_ledger.release_for_booking(db, booking)
            self._mark_cancelled(booking, REASON_VERIFICATION_FAILED)
            db.commit()
            logger.warning(
                "Payment verification failed: booking=%s order=%s; released %s slot(s)",
                booking.id, order_id, released,
            )
            raise PaymentRejected("Payment verification failed", booking_id=booking.id)

        booking.payment_transaction_id = transaction_id
        booking.is_advance_paid = True
        # Remaining amount is collected out-of-band (at the venue)
        booking.status = STATUS_CONFIRMED
        db.commit()
        db.refresh(booking)
        logger.info("Booking %s confirmed (order=%s payment=%s)", booking.id, order_id, transaction_id)
        return booking

    def cancel(self, booking_id: str, actor: Actor, reason: str | None = None) -> Booking:
        db = self._db
        booking = db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFound("Booking not found", booking_id=booking_id)
        if booking.user_id != actor.user_id and not actor.is_admin:
            raise Forbidden("Not authorized to cancel this booking", booking_id=booking_id)
        if booking.status == STATUS_CANCELLED:
            raise InvalidState("Booking is already cancelled", booking_id=booking_id, status=booking.status)
        if booking.status == STATUS_COMPLETED:
            raise InvalidState("Cannot cancel completed booking", booking_id=booking_id, status=booking.status)

        self._mark_cancelled(booking, (reason or "").strip() or REASON_DEFAULT_CANCEL)
        if booking.is_advance_paid:
            # Actual money movement happens out-of-band; only the bookkeeping is recorded
            booking.refund_status = REFUND_PENDING
            booking.refund_amount = booking.total_amount
        released = slot_ledger.release_for_booking(db, booking)
        db.commit()
        db.refresh(booking)
        logger.info(
            "Booking %s cancelled by %s (%s); released %s slot(s), refund=%s",
            booking.id, actor.user_id, booking.cancellation_reason, released, booking.refund_status,
        )
        return booking

    def expire_pending(self, older_than: datetime) -> int:
        """Cancel pending bookings created before older_than and free their slots. Returns count."""
        db = self._db
        stale = (
            db.query(Booking)
            .filter(Booking.status == STATUS_PENDING, Booking.created_at < older_than)
            .all()
        )
        for booking in stale:
            slot_ledger.release_for_booking(db, booking)
            self._mark_cancelled(booking, REASON_PAYMENT_EXPIRED)
        if stale:
            db.commit()
            logger.info("Expired %s pending booking(s) created before %s", len(stale), older_than.isoformat())
        return len(stale)

    def _mark_cancelled(self, booking: Booking, reason: str) -> None:
        booking.status = STATUS_CANCELLED
        booking.cancelled_at = self._now()
        booking.cancellation_reason = reason
