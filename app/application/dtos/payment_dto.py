"""DTOs para pagos."""

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.payment import Payment, PaymentStatus


@dataclass
class PaymentInitiationDTO:
    """Resultado de iniciar un pago en la pasarela."""

    payment_id: str
    booking_id: str
    gateway_payment_id: str | None
    redirect_url: str | None
    amount: Decimal
    status: PaymentStatus

    # False si la pasarela no respondió; el pago queda PENDING
    gateway_confirmed: bool = True

    @classmethod
    def from_payment(cls, payment: Payment, gateway_confirmed: bool = True) -> "PaymentInitiationDTO":
        return cls(
            payment_id=payment.id,
            booking_id=payment.booking_id,
            gateway_payment_id=payment.gateway_payment_id,
            redirect_url=payment.redirect_url,
            amount=payment.amount,
            status=payment.status,
            gateway_confirmed=gateway_confirmed,
        )


@dataclass
class WebhookOutcomeDTO:
    payment_id: str
    booking_id: str
    payment_status: PaymentStatus
    payment_changed: bool
    booking_status: str | None = None
