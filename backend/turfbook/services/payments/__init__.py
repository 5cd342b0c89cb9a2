"""Payment order service and signature verification."""
import logging

from turfbook.config import Settings
from turfbook.services.payments.base import PaymentGateway
from turfbook.services.payments.local_gateway import LocalOrderGateway
from turfbook.services.payments.razorpay_gateway import RazorpayGateway
from turfbook.services.payments.signature import compute_signature, signature_matches
from turfbook.services.payments.types import PaymentOrder

logger = logging.getLogger(__name__)

_local_gateway: LocalOrderGateway | None = None


def build_gateway(settings: Settings) -> PaymentGateway:
    """Razorpay when credentials are configured, otherwise the shared local gateway."""
    global _local_gateway
    if settings.payment_key_id and settings.payment_key_secret:
        return RazorpayGateway(
            settings.payment_key_id,
            settings.payment_key_secret,
            base_url=settings.payment_api_base_url or None,
        )
    if _local_gateway is None:
        logger.warning("PAYMENT_KEY_ID not configured; using local order gateway (no real payments)")
        _local_gateway = LocalOrderGateway()
    return _local_gateway


__all__ = [
    "LocalOrderGateway",
    "PaymentGateway",
    "PaymentOrder",
    "RazorpayGateway",
    "build_gateway",
    "compute_signature",
    "signature_matches",
]
