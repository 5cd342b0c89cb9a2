"""
Calendar-day normalization. Every slot and booking date is stored as UTC midnight and
queried with a [day_start, day_start + 1 day) range, never exact equality, so lookups do
not depend on the client's timezone.
"""
import re
from datetime import datetime, timedelta, timezone

from turfbook.core.errors import InvalidInput

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_date(date_str: str) -> datetime:
    """'YYYY-MM-DD' -> aware datetime at 00:00 UTC. Raises InvalidInput when malformed."""
    raw = (date_str or "").strip()
    if not _DATE_RE.match(raw):
        raise InvalidInput("Date must be in YYYY-MM-DD format", date=date_str)
    try:
        day = datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        raise InvalidInput("Date is not a valid calendar day", date=date_str) from None
    return day.replace(tzinfo=timezone.utc)


def date_range(date_str: str) -> tuple[datetime, datetime]:
    start = normalize_date(date_str)
    return start, start + timedelta(days=1)


def day_range(day_start: datetime) -> tuple[datetime, datetime]:
    """Range for an already-normalized (stored) day value."""
    return day_start, day_start + timedelta(days=1)


def date_to_str(value: datetime | None) -> str | None:
    return value.strftime("%Y-%m-%d") if value else None
