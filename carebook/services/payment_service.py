import logging

from ..models.appointment import Appointment

logger = logging.getLogger(__name__)

class PaymentGateway:
    """Simulated gateway. Every charge succeeds; no money moves."""

    def charge(self, appointment: Appointment, payment_method: str) -> bool:
        logger.info(f"Simulated {payment_method} payment for appointment {appointment.id}")
        return True

def get_payment_gateway() -> PaymentGateway:
    """Get payment gateway."""
    return PaymentGateway()
