"""
Reservation: turn a requested time range into claimed half-hour slots, a pending booking
and an advance-payment order.

Claims proceed key by key, each committed on its own. If any claim fails (a lost race or a
database error) or the payment order cannot be opened, every slot claimed in this attempt
is released before the error propagates, so a failed attempt never leaves slots held
without a booking.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Union

from sqlalchemy.orm import Session

from turfbook.config import Settings
from turfbook.core.constants import MINUTES_PER_DAY, PAYMENT_TYPE_ADVANCE, STATUS_PENDING
from turfbook.core.errors import Conflict, InvalidInput, PaymentGatewayError, Unavailable
from turfbook.models.booking import Booking
from turfbook.models.venue import new_id
from turfbook.services import slot_ledger
from turfbook.services.dates import normalize_date
from turfbook.services.payments import PaymentGateway, PaymentOrder
from turfbook.services.time_grid import (
    enumerate_keys,
    format_minutes,
    hours_to_minutes,
    minutes_to_hours,
    operating_window,
    parse_end_time,
    parse_time,
)
from turfbook.services.venue_lookup import VenueInfo, get_venue

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


# ---------------------------------------------------------------------------
# Request shapes: both are normalized to CanonicalRange at the boundary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeRange:
    start_time: str
    end_time: str


@dataclass(frozen=True)
class LegacySlot:
    """Older clients send a start time plus a duration in hours."""

    time: str
    duration_hours: Any


BookingRequest = Union[TimeRange, LegacySlot]


@dataclass(frozen=True)
class CanonicalRange:
    start_min: int
    end_min: int

    @property
    def start_time(self) -> str:
        return format_minutes(self.start_min)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end_min)

    @property
    def time_keys(self) -> list[str]:
        return enumerate_keys(self.start_min, self.end_min)

    @property
    def duration_hours(self) -> Decimal:
        return minutes_to_hours(self.end_min - self.start_min)


def normalize_request(request: BookingRequest | None) -> CanonicalRange:
    if isinstance(request, TimeRange):
        start = parse_time(request.start_time)
        end = parse_end_time(request.end_time)
    elif isinstance(request, LegacySlot):
        start = parse_time(request.time)
        end = start + hours_to_minutes(request.duration_hours)
    else:
        raise InvalidInput("Please provide either (start_time and end_time) or (time and duration)")
    if end <= start:
        raise InvalidInput("End time must be after start time", start_time=format_minutes(start))
    if end > MINUTES_PER_DAY:
        raise InvalidInput("Booking cannot run past midnight", start_time=format_minutes(start))
    return CanonicalRange(start_min=start, end_min=end)


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BookingPolicy:
    advance_ratio: Decimal = Decimal("0.25")
    currency: str = "INR"
    default_open: str = "06:00"
    default_close: str = "22:00"
    enforce_operating_hours: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "BookingPolicy":
        return cls(
            advance_ratio=Decimal(str(settings.advance_ratio)),
            currency=settings.currency,
            default_open=settings.default_open_time,
            default_close=settings.default_close_time,
            enforce_operating_hours=settings.enforce_operating_hours,
        )


def split_amount(price_per_hour: Decimal, duration_hours: Decimal, advance_ratio: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    """(total, advance, remaining). Advance is rounded half-up to whole currency units."""
    total = (Decimal(price_per_hour) * Decimal(duration_hours)).quantize(_CENTS)
    advance = (total * advance_ratio).quantize(Decimal("1"), rounding=ROUND_HALF_UP).quantize(_CENTS)
    return total, advance, total - advance


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ReservationOrchestrator:
    def __init__(
        self,
        db: Session,
        gateway: PaymentGateway,
        policy: BookingPolicy | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db = db
        self._gateway = gateway
        self._policy = policy or BookingPolicy()
        self._now = clock or (lambda: datetime.now(timezone.utc))

    def create_booking(
        self,
        user_id: str,
        venue_id: str,
        date_str: str,
        request: BookingRequest | None,
    ) -> tuple[Booking, PaymentOrder]:
        db = self._db
        rng = normalize_request(request)

        venue = get_venue(db, venue_id)
        if not venue.is_bookable:
            raise Unavailable("Venue is not available for booking", venue_id=venue_id)

        keys = rng.time_keys
        if self._policy.enforce_operating_hours:
            self._check_operating_hours(venue, rng)

        day = normalize_date(date_str)
        logger.info(
            "Booking request: user=%s venue=%s date=%s %s-%s keys=%s",
            user_id, venue_id, date_str, rng.start_time, rng.end_time, keys,
        )

        # Advisory pre-check; claim() below is the authoritative decision
        existing = slot_ledger.find_slots(db, venue.id, day, keys)
        taken = {s.time for s in existing if s.is_booked or s.is_blocked}
        for key in keys:
            if key in taken:
                raise Unavailable(
                    f"Time range not available. Slot {key} is already booked or blocked.",
                    time=key,
                )

        total, advance, remaining = split_amount(venue.price_per_hour, rng.duration_hours, self._policy.advance_ratio)

        booking_id = new_id()
        claimed_ids = self._claim_all(venue.id, day, keys, booking_id)
        primary_slot_id = claimed_ids[0]

        metadata = {
            "user_id": user_id,
            "venue_id": venue.id,
            "slot_id": primary_slot_id,
            "booking_id": booking_id,
            "date": date_str,
            "start_time": rng.start_time,
            "end_time": rng.end_time,
            "duration": str(rng.duration_hours),
            "payment_type": PAYMENT_TYPE_ADVANCE,
            "total_amount": str(total),
            "advance_amount": str(advance),
        }
        try:
            order = self._gateway.create_order(to_minor_units(advance), self._policy.currency, metadata)
        except PaymentGatewayError:
            logger.warning("Payment order failed for booking %s; releasing %s slot(s)", booking_id, len(claimed_ids))
            self._release_claims(claimed_ids, booking_id)
            raise
        except Exception:
            logger.exception("Payment order crashed for booking %s; releasing %s slot(s)", booking_id, len(claimed_ids))
            self._release_claims(claimed_ids, booking_id)
            raise

        booking = Booking(
            id=booking_id,
            user_id=user_id,
            venue_id=venue.id,
            slot_id=primary_slot_id,
            date=day,
            start_time=rng.start_time,
            end_time=rng.end_time,
            duration_hours=rng.duration_hours,
            total_amount=total,
            advance_amount=advance,
            remaining_amount=remaining,
            is_advance_paid=False,
            is_full_amount_paid=False,
            payment_order_id=order.order_id,
            status=STATUS_PENDING,
            created_at=self._now(),
        )
        try:
            db.add(booking)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Could not persist booking %s; releasing its slots", booking_id)
            self._release_claims(claimed_ids, booking_id)
            raise
        db.refresh(booking)
        logger.info(
            "Booking %s created (pending): %s slot(s), total=%s advance=%s order=%s",
            booking.id, len(claimed_ids), total, advance, order.order_id,
        )
        return booking, order

    def _claim_all(self, venue_id: str, day: datetime, keys: list[str], booking_id: str) -> list[str]:
        db = self._db
        claimed_ids: list[str] = []
        try:
            for key in keys:
                slot = slot_ledger.claim(db, venue_id, day, key, booking_id)
                claimed_ids.append(slot.id)
                db.commit()
        except Conflict as e:
            db.rollback()
            logger.warning(
                "Claim conflict at %s for booking %s; rolling back %s slot(s)",
                e.context.get("time"), booking_id, len(claimed_ids),
            )
            self._release_claims(claimed_ids, booking_id)
            raise
        except Exception:
            db.rollback()
            logger.exception("Claim failed for booking %s; rolling back %s slot(s)", booking_id, len(claimed_ids))
            self._release_claims(claimed_ids, booking_id)
            raise
        return claimed_ids

    def _release_claims(self, slot_ids: list[str], booking_id: str) -> None:
        slot_ledger.release_many(self._db, slot_ids, booking_id)
        self._db.commit()

    def _check_operating_hours(self, venue: VenueInfo, rng: CanonicalRange) -> None:
        open_min, close_min = operating_window(
            venue.open_time, venue.close_time, self._policy.default_open, self._policy.default_close
        )
        if rng.start_min < open_min or rng.end_min > close_min:
            raise InvalidInput(
                "Requested time is outside the venue's operating hours",
                start_time=rng.start_time,
                end_time=rng.end_time,
            )
