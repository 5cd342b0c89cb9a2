"""One half-hour interval of one venue on one day. Created lazily by the first claim; never deleted."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.sql import func

from turfbook.db.base import Base
from turfbook.models.venue import new_id


class Slot(Base):
    __tablename__ = "slots"

    id = Column(String(32), primary_key=True, default=new_id)
    venue_id = Column(String(32), ForeignKey("venues.id"), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)  # UTC midnight of the calendar day
    time = Column(String(5), nullable=False)  # "HH:MM" on the 30-minute grid
    is_booked = Column(Boolean, nullable=False, default=False)
    is_blocked = Column(Boolean, nullable=False, default=False)  # owner-set, independent of booking
    # Back-reference only (no FK): a slot is claimed before its booking row is written
    booking_id = Column(String(32), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint("venue_id", "date", "time", name="uq_slots_venue_date_time"),)

    @property
    def is_available(self) -> bool:
        return not self.is_booked and not self.is_blocked
