from turfbook.services.payment_reconciler import PaymentReconciler
from turfbook.services.reservation_service import BookingPolicy, ReservationOrchestrator

__all__ = ["BookingPolicy", "PaymentReconciler", "ReservationOrchestrator"]
