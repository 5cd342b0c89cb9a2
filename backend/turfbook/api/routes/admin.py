"""
Admin API: platform-wide booking listing. Mounted under /api/admin; every route requires
the admin role.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from turfbook.api.deps import require_admin
from turfbook.db.session import get_db
from turfbook.services.booking_queries import list_all_bookings

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/bookings")
def all_bookings(db: Session = Depends(get_db)) -> dict[str, Any]:
    rows = list_all_bookings(db)
    return {"success": True, "count": len(rows), "data": rows}
