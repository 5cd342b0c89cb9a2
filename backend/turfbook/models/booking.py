"""A user's reservation over one or more contiguous slots, with payment and lifecycle state."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.sql import func

from turfbook.core.constants import REFUND_NONE, STATUS_PENDING
from turfbook.db.base import Base
from turfbook.models.venue import new_id


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False)
    venue_id = Column(String(32), ForeignKey("venues.id"), nullable=False)
    slot_id = Column(String(32), ForeignKey("slots.id"), nullable=False)  # primary (first) slot
    date = Column(DateTime(timezone=True), nullable=False)  # UTC midnight
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=True)  # null on legacy single-slot rows
    duration_hours = Column(Numeric(4, 1), nullable=False)

    total_amount = Column(Numeric(10, 2), nullable=False)
    advance_amount = Column(Numeric(10, 2), nullable=False)
    remaining_amount = Column(Numeric(10, 2), nullable=False)
    is_advance_paid = Column(Boolean, nullable=False, default=False)
    is_full_amount_paid = Column(Boolean, nullable=False, default=False)
    payment_order_id = Column(String(64), nullable=True, unique=True)
    payment_transaction_id = Column(String(64), nullable=True)

    status = Column(String(16), nullable=False, default=STATUS_PENDING)  # pending | confirmed | cancelled | completed
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    refund_status = Column(String(16), nullable=False, default=REFUND_NONE)  # none | pending | processed
    refund_amount = Column(Numeric(10, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_bookings_user_created", "user_id", "created_at"),
        Index("ix_bookings_venue_date", "venue_id", "date"),
        Index("ix_bookings_status", "status"),
    )
