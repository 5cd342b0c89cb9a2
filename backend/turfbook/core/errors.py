"""
Centralized error handling for booking, slot and payment failures.
Services raise BookingError subclasses; one handler maps them to HTTP so routes stay thin.
"""
from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# HTTP status codes for known error categories
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_PAYMENT_REQUIRED = 402  # signature mismatch
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409  # slot taken, lost race, wrong booking status
STATUS_BAD_GATEWAY = 502  # payment provider down


class BookingError(Exception):
    """Base for every failure the core reports to its caller."""

    code = "booking_error"
    status_code = STATUS_BAD_REQUEST

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = {k: v for k, v in context.items() if v is not None}

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, **self.context}


class InvalidInput(BookingError):
    """Malformed date/time/duration or missing fields. User-correctable, never retried."""

    code = "invalid_input"
    status_code = STATUS_BAD_REQUEST


class NotFound(BookingError):
    code = "not_found"
    status_code = STATUS_NOT_FOUND


class Unavailable(BookingError):
    """Venue inactive/unapproved, or a requested slot is already booked or blocked."""

    code = "unavailable"
    status_code = STATUS_CONFLICT


class Conflict(BookingError):
    """Lost a claim race. Safe to retry the whole reservation from scratch."""

    code = "conflict"
    status_code = STATUS_CONFLICT


class Forbidden(BookingError):
    code = "forbidden"
    status_code = STATUS_FORBIDDEN


class PaymentRejected(BookingError):
    """Signature mismatch. Terminal for that booking attempt."""

    code = "payment_rejected"
    status_code = STATUS_PAYMENT_REQUIRED


class InvalidState(BookingError):
    code = "invalid_state"
    status_code = STATUS_CONFLICT


class PaymentGatewayError(BookingError):
    """Payment order could not be created upstream."""

    code = "payment_gateway_error"
    status_code = STATUS_BAD_GATEWAY


async def _handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Install the BookingError -> JSON response handler on the app."""
    app.add_exception_handler(BookingError, _handle_booking_error)
