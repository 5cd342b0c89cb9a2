"""
Half-hour time grid. Keys are canonical zero-padded "HH:MM" strings on a 30-minute grid;
ranges are [start, end): 10:00-11:00 -> ["10:00", "10:30"].
"""
import re
from decimal import Decimal

from turfbook.core.constants import MINUTES_PER_DAY, SLOT_MINUTES
from turfbook.core.errors import InvalidInput

_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_time(value: str) -> int:
    """'HH:MM' -> minutes since midnight. Rejects malformed and off-grid times."""
    m = _TIME_RE.match((value or "").strip())
    if not m:
        raise InvalidInput("Time must be in HH:MM format", time=value)
    minutes = int(m.group(1)) * 60 + int(m.group(2))
    if minutes % SLOT_MINUTES:
        raise InvalidInput(f"Time must be on the {SLOT_MINUTES}-minute grid", time=value)
    return minutes


def format_minutes(minutes: int) -> str:
    """Minutes since midnight -> 'HH:MM'. 1440 renders as '24:00' (end of day)."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def canonical(value: str) -> str:
    """Validate and zero-pad a time key ('9:30' -> '09:30')."""
    return format_minutes(parse_time(value))


def parse_end_time(value: str) -> int:
    """Like parse_time, but also accepts '24:00' as an end-of-day bound."""
    if (value or "").strip() == "24:00":
        return MINUTES_PER_DAY
    return parse_time(value)


def enumerate_keys(start_min: int, end_min: int) -> list[str]:
    """All slot keys in [start, end) on the grid."""
    return [format_minutes(m) for m in range(start_min, end_min, SLOT_MINUTES)]


def hours_to_minutes(duration_hours) -> int:
    """Duration in hours (multiple of 0.5) -> minutes. Raises InvalidInput otherwise."""
    try:
        hours = Decimal(str(duration_hours))
    except ArithmeticError:
        raise InvalidInput("Duration must be a number of hours", duration=duration_hours) from None
    if not hours.is_finite() or hours <= 0:
        raise InvalidInput("Duration must be greater than zero", duration=duration_hours)
    minutes = hours * 60
    if minutes != minutes.to_integral_value() or int(minutes) % SLOT_MINUTES:
        raise InvalidInput("Duration must be a multiple of 0.5 hours", duration=duration_hours)
    return int(minutes)


def minutes_to_hours(minutes: int) -> Decimal:
    return Decimal(minutes) / Decimal(60)


def parse_clock(value: str | None) -> int | None:
    """Lenient 'HH:MM' for stored venue hours: any minute, '24:00' allowed. None if unreadable."""
    s = (value or "").strip()
    if s == "24:00":
        return MINUTES_PER_DAY
    m = _TIME_RE.match(s)
    if not m:
        return None
    return int(m.group(1)) * 60 + int(m.group(2))


def operating_window(open_time: str | None, close_time: str | None, default_open: str, default_close: str) -> tuple[int, int]:
    """
    Venue hours as a [start, end) window on the grid. Off-grid hours are snapped inward
    (06:15-21:45 -> 06:30-21:30), a close of 00:00 means midnight, and missing or
    unreadable hours fall back to the defaults.
    """
    open_min = parse_clock(open_time)
    if open_min is None:
        open_min = parse_time(default_open)
    close_min = parse_clock(close_time)
    if close_min is None:
        close_min = parse_end_time(default_close)
    if close_min == 0:
        close_min = MINUTES_PER_DAY
    start = -(-open_min // SLOT_MINUTES) * SLOT_MINUTES
    end = close_min - close_min % SLOT_MINUTES
    return start, max(start, end)
