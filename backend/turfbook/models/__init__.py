from turfbook.models.booking import Booking
from turfbook.models.slot import Slot
from turfbook.models.venue import Venue

__all__ = [
    "Booking",
    "Slot",
    "Venue",
]
