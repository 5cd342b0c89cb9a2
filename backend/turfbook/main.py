"""
FastAPI app entrypoint.

Turf booking: slot availability, reservations with advance payment, payment verification
and cancellation.
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from turfbook.api.routes import admin, bookings, payments, venues
from turfbook.config import settings
from turfbook.core.constants import PENDING_EXPIRY_JOB_ID
from turfbook.core.errors import register_error_handlers
from turfbook.scheduler.pending_expiry_job import run_expire_pending_bookings_job

logger = logging.getLogger(__name__)

_scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.pending_booking_ttl_minutes > 0:
        _scheduler.add_job(
            run_expire_pending_bookings_job,
            "interval",
            seconds=settings.expiry_sweep_interval_seconds,
            id=PENDING_EXPIRY_JOB_ID,
            replace_existing=True,
        )
        logger.info(
            "Pending-booking expiry every %ss (ttl %s min)",
            settings.expiry_sweep_interval_seconds,
            settings.pending_booking_ttl_minutes,
        )
    _scheduler.start()
    app.state.scheduler = _scheduler
    logger.info("Backend ready")
    yield
    _scheduler.shutdown(wait=False)


app = FastAPI(title="Turf Booking", version="0.1.0", lifespan=lifespan)
register_error_handlers(app)

# CORS: dev origins + optional CORS_ORIGINS (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_extra = settings.cors_origins or os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(venues.router, prefix="/api/venues", tags=["venues"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Turf Booking API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
