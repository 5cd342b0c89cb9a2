"""
Single source of truth for database tables that exist after migrations.

alembic/env.py asserts the registered models match this tuple.
"""
ALL_TABLE_NAMES = (
    "venues",
    "slots",
    "bookings",
)
