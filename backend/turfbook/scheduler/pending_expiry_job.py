"""
Expire abandoned reservations: every EXPIRY_SWEEP_INTERVAL_SECONDS, cancel pending bookings
older than PENDING_BOOKING_TTL_MINUTES and free their slots. Only scheduled when the TTL
is positive; with TTL 0 pending bookings hold their slots until verified or cancelled.
"""
import logging
from datetime import datetime, timedelta, timezone

from turfbook.config import settings
from turfbook.db.session import SessionLocal
from turfbook.services.payment_reconciler import PaymentReconciler

logger = logging.getLogger(__name__)


def run_expire_pending_bookings_job(ttl_minutes: int | None = None, session_factory=SessionLocal) -> int:
    ttl = settings.pending_booking_ttl_minutes if ttl_minutes is None else ttl_minutes
    if ttl <= 0:
        return 0
    db = session_factory()
    try:
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=ttl)
        n = PaymentReconciler(db, settings.payment_key_secret).expire_pending(cutoff)
        if n:
            logger.info("Expiry job: cancelled %s stale pending booking(s)", n)
        return n
    except Exception as e:
        logger.exception("Expiry job failed: %s", e)
        db.rollback()
        return 0
    finally:
        db.close()
