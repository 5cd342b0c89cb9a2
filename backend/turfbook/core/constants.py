"""
Centralized constants for slots, bookings and scheduler jobs.

Change literals here instead of scattering them across services and routes.
"""

# Slot grid: every slot is one half hour; time keys are "HH:MM" on this grid
SLOT_MINUTES = 30
MINUTES_PER_DAY = 24 * 60

# Booking.status
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
STATUS_COMPLETED = "completed"
BOOKING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED, STATUS_COMPLETED)
TERMINAL_STATUSES = (STATUS_CANCELLED, STATUS_COMPLETED)

# Booking.refund_status
REFUND_NONE = "none"
REFUND_PENDING = "pending"
REFUND_PROCESSED = "processed"

# Actor roles (from the bearer token)
ROLE_USER = "user"
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"

# Cancellation reasons written by the core
REASON_VERIFICATION_FAILED = "Payment verification failed"
REASON_DEFAULT_CANCEL = "Cancelled by user"
REASON_PAYMENT_EXPIRED = "Payment window expired"

PAYMENT_TYPE_ADVANCE = "advance"

# Scheduler job IDs (must match ids used in main.py add_job)
PENDING_EXPIRY_JOB_ID = "pending_booking_expiry"
