"""
FastAPI dependencies: the calling actor (from the bearer token) and per-request
orchestrator/reconciler built from settings.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from turfbook.config import Settings, settings as app_settings
from turfbook.core.auth import Actor, InvalidToken, decode_token
from turfbook.db.session import get_db
from turfbook.services.payment_reconciler import PaymentReconciler
from turfbook.services.payments import PaymentGateway, build_gateway
from turfbook.services.reservation_service import BookingPolicy, ReservationOrchestrator

_bearer = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    return app_settings


def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Actor:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized
    try:
        return decode_token(credentials.credentials, settings.jwt_secret, settings.jwt_algorithm)
    except InvalidToken:
        raise unauthorized from None


def require_owner_or_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not (actor.is_owner or actor.is_admin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Owner or admin role required")
    return actor


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return actor


def get_payment_gateway(settings: Settings = Depends(get_settings)) -> PaymentGateway:
    return build_gateway(settings)


def get_orchestrator(
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    settings: Settings = Depends(get_settings),
) -> ReservationOrchestrator:
    return ReservationOrchestrator(db, gateway, BookingPolicy.from_settings(settings))


def get_reconciler(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> PaymentReconciler:
    return PaymentReconciler(db, settings.payment_key_secret)
