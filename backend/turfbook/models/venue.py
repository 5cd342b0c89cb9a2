"""Bookable sports ground. Owned by the venue service; the booking core only reads it."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Numeric, String
from sqlalchemy.sql import func

from turfbook.db.base import Base


def new_id() -> str:
    return uuid.uuid4().hex


class Venue(Base):
    __tablename__ = "venues"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    owner_id = Column(String(64), nullable=False, index=True)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    open_time = Column(String(5), nullable=True)  # "HH:MM"; null = default operating hours
    close_time = Column(String(5), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
