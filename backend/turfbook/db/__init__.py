from turfbook.db.base import Base
from turfbook.db.session import get_db, engine, SessionLocal
from turfbook.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
