import os

# Settings are read at import time; point them at throwaway values before turfbook loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PAYMENT_KEY_ID"] = ""
os.environ["PAYMENT_KEY_SECRET"] = "test-payment-secret"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["PENDING_BOOKING_TTL_MINUTES"] = "0"

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import turfbook.models  # noqa: F401  (registers tables)
from turfbook.db.base import Base
from turfbook.models.slot import Slot
from turfbook.models.venue import Venue
from turfbook.services.dates import normalize_date
from turfbook.services.payment_reconciler import PaymentReconciler
from turfbook.services.payments import LocalOrderGateway
from turfbook.services.reservation_service import ReservationOrchestrator

PAYMENT_SECRET = "test-payment-secret"
JWT_SECRET = "test-jwt-secret"
DAY = "2025-03-10"


@pytest.fixture
def engine():
    # One shared connection so test, request and job sessions see the same in-memory database
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def make_venue(db):
    def _make(price="1000", owner_id="owner-1", **kw) -> Venue:
        fields = {"name": "City Arena", "is_active": True, "is_approved": True}
        fields.update(kw)
        venue = Venue(owner_id=owner_id, price_per_hour=Decimal(price), **fields)
        db.add(venue)
        db.commit()
        return venue

    return _make


@pytest.fixture
def venue(make_venue):
    return make_venue()


@pytest.fixture
def seed_slot(db):
    def _seed(venue_id: str, time: str, date_str: str = DAY, **kw) -> Slot:
        slot = Slot(venue_id=venue_id, date=normalize_date(date_str), time=time, **kw)
        db.add(slot)
        db.commit()
        return slot

    return _seed


@pytest.fixture
def gateway():
    return LocalOrderGateway()


@pytest.fixture
def orchestrator(db, gateway):
    return ReservationOrchestrator(db, gateway)


@pytest.fixture
def reconciler(db):
    return PaymentReconciler(db, PAYMENT_SECRET)


def slots_for(db, venue_id: str) -> dict[str, Slot]:
    db.expire_all()
    return {s.time: s for s in db.query(Slot).filter(Slot.venue_id == venue_id).all()}
