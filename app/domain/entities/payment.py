"""Entidad Payment - cargo de renta o retención de depósito de una reserva."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.value_objects.money import Money


class PaymentStatus(str, Enum):
    """Estados posibles de un pago."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


class PaymentKind(str, Enum):
    """Tipo de pago: cargo directo de la renta o retención (hold) del depósito."""

    RENTAL = "RENTAL"
    DEPOSIT_HOLD = "DEPOSIT_HOLD"

    @classmethod
    def from_request(cls, payment_type: str) -> "PaymentKind":
        """Traduce el ``payment_type`` público (rental|deposit) al tipo interno."""
        mapping = {"rental": cls.RENTAL, "deposit": cls.DEPOSIT_HOLD}
        try:
            return mapping[payment_type.lower()]
        except KeyError:
            raise ValueError(f"payment_type inválido: {payment_type}") from None


# Vocabulario de la pasarela -> estado interno
PROVIDER_STATUS_MAP: dict[str, PaymentStatus] = {
    "CONFIRMED": PaymentStatus.COMPLETED,
    "CANCELLED": PaymentStatus.CANCELLED,
    "REJECTED": PaymentStatus.FAILED,
}


def map_provider_status(provider_status: str | None) -> PaymentStatus:
    """CONFIRMED→COMPLETED, CANCELLED→CANCELLED, REJECTED→FAILED, cualquier otro→PENDING."""
    return PROVIDER_STATUS_MAP.get((provider_status or "").upper(), PaymentStatus.PENDING)


@dataclass
class Payment:
    """
    Pago asociado a una reserva.

    ``order_id`` se genera una vez al autorizar; ``gateway_payment_id`` es la
    llave de unión con los webhooks y es única por pago.
    """

    id: str
    booking_id: str
    order_id: str
    kind: PaymentKind
    amount: Decimal
    currency_code: str = "RUB"
    gateway_payment_id: str | None = None
    redirect_url: str | None = None
    provider_status: str | None = None
    status: PaymentStatus = PaymentStatus.PENDING

    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def money(self) -> Money:
        return Money(amount=self.amount, currency_code=self.currency_code)

    @property
    def is_final(self) -> bool:
        """Un pago final nunca regresa a PENDING."""
        return self.status != PaymentStatus.PENDING

    @property
    def outcome_unknown(self) -> bool:
        """Se escribió el marcador PENDING pero la pasarela nunca confirmó la creación."""
        return self.status == PaymentStatus.PENDING and self.gateway_payment_id is None

    # === Métodos de negocio ===

    def attach_gateway_payment(self, gateway_payment_id: str, redirect_url: str | None, now: datetime) -> None:
        self.gateway_payment_id = gateway_payment_id
        self.redirect_url = redirect_url
        self.updated_at = now

    def accepts(self, target: PaymentStatus) -> bool:
        """
        Indica si ``target`` es un cambio aplicable.

        Reglas: el mismo estado es un no-op; un pago final no regresa a
        PENDING; una retención COMPLETED aún puede pasar a CANCELLED (anulada)
        y un pago FAILED no revive.
        """
        if target == self.status:
            return False
        if self.status == PaymentStatus.PENDING:
            return True
        if self.status == PaymentStatus.COMPLETED:
            return target == PaymentStatus.CANCELLED
        return False

    def apply_status(self, target: PaymentStatus, provider_status: str | None, now: datetime) -> bool:
        """Aplica ``target`` si es aceptable. Retorna True si el estado cambió."""
        if not self.accepts(target):
            return False
        self.status = target
        self.provider_status = provider_status
        self.updated_at = now
        return True

    def fail(self, now: datetime, provider_status: str | None = None) -> None:
        if self.status != PaymentStatus.PENDING:
            raise ValueError(f"No se puede marcar como fallido un pago en estado {self.status}")
        self.status = PaymentStatus.FAILED
        self.provider_status = provider_status
        self.updated_at = now
