"""
Venue lookup: the booking core's read-only view of a venue.
"""
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from turfbook.core.errors import NotFound
from turfbook.models.venue import Venue


@dataclass(frozen=True)
class VenueInfo:
    id: str
    owner_id: str
    price_per_hour: Decimal
    open_time: str | None
    close_time: str | None
    is_active: bool
    is_approved: bool

    @property
    def is_bookable(self) -> bool:
        return self.is_active and self.is_approved


def get_venue(db: Session, venue_id: str) -> VenueInfo:
    """Return an immutable snapshot of the venue. Raises NotFound."""
    row = db.query(Venue).filter(Venue.id == venue_id).first()
    if not row:
        raise NotFound("Venue not found", venue_id=venue_id)
    return VenueInfo(
        id=row.id,
        owner_id=row.owner_id,
        price_per_hour=Decimal(row.price_per_hour),
        open_time=row.open_time,
        close_time=row.close_time,
        is_active=bool(row.is_active),
        is_approved=bool(row.is_approved),
    )


def list_owner_venue_ids(db: Session, owner_id: str) -> list[str]:
    return [r.id for r in db.query(Venue.id).filter(Venue.owner_id == owner_id).all()]
