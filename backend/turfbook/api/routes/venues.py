"""
Venue availability (public): the full-day half-hour grid for one venue and date.
Mounted under /api/venues. Results may be stale by the time a booking is attempted.
"""
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from turfbook.api.deps import get_settings
from turfbook.config import Settings
from turfbook.db.session import get_db
from turfbook.services.slot_ledger import list_available_slots
from turfbook.services.venue_lookup import get_venue

router = APIRouter()


@router.get("/{venue_id}/slots")
def venue_slots(
    venue_id: str,
    date: str = Query(..., description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    venue = get_venue(db, venue_id)
    slots = list_available_slots(
        db,
        venue,
        date,
        default_open=settings.default_open_time,
        default_close=settings.default_close_time,
    )
    return {"success": True, "data": slots}
