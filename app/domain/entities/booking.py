"""Entidad Booking - agregado raíz de una renta de remolque."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import InvalidTransitionError
from app.domain.value_objects.datetime_range import DatetimeRange

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Estados posibles de una reserva."""

    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class RentalType(str, Enum):
    HOURLY = "HOURLY"
    DAILY = "DAILY"


# Transiciones permitidas: estado actual -> estados destino
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING_PAYMENT: frozenset({BookingStatus.PAID, BookingStatus.CANCELLED}),
    BookingStatus.PAID: frozenset({BookingStatus.ACTIVE, BookingStatus.CANCELLED}),
    BookingStatus.ACTIVE: frozenset({BookingStatus.RETURNED}),
    BookingStatus.RETURNED: frozenset({BookingStatus.CLOSED}),
    BookingStatus.CLOSED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({BookingStatus.CLOSED, BookingStatus.CANCELLED})


@dataclass(frozen=True)
class PricingSnapshot:
    """Precio congelado al crear la reserva; cambios posteriores de tarifas no lo alteran."""

    base_cost: Decimal
    add_on_cost: Decimal
    deposit_amount: Decimal
    total: Decimal
    currency_code: str = "RUB"


@dataclass
class Booking:
    """
    Reserva de un remolque.

    Solo se muta a través de los métodos de transición; cualquier salto fuera
    de ``ALLOWED_TRANSITIONS`` lanza ``InvalidTransitionError``.
    """

    id: str
    user_id: str
    trailer_id: str
    start_time: datetime
    end_time: datetime
    rental_type: RentalType
    pricing: PricingSnapshot
    add_ons: list[str] = field(default_factory=list)
    status: BookingStatus = BookingStatus.PENDING_PAYMENT

    # Control de concurrencia
    lock_version: int = 0

    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades calculadas ===

    @property
    def window(self) -> DatetimeRange:
        return DatetimeRange(start=self.start_time, end=self.end_time)

    @property
    def total_amount(self) -> Decimal:
        return self.pricing.total

    @property
    def deposit_amount(self) -> Decimal:
        return self.pricing.deposit_amount

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def blocks_availability(self) -> bool:
        """Una reserva bloquea el remolque mientras no esté cerrada o cancelada."""
        return not self.is_terminal

    @property
    def can_be_cancelled(self) -> bool:
        return self.status in (BookingStatus.PENDING_PAYMENT, BookingStatus.PAID)

    def conflicts_with(self, window: DatetimeRange) -> bool:
        return self.blocks_availability and self.window.overlaps_with(window)

    # === Métodos de negocio ===

    def mark_paid(self, now: datetime) -> None:
        """El pago de la renta quedó COMPLETED."""
        self._transition(BookingStatus.PAID, now)

    def activate(self, now: datetime) -> None:
        """La retención del depósito fue aceptada."""
        self._transition(BookingStatus.ACTIVE, now)

    def mark_returned(self, now: datetime) -> None:
        """Las cuatro fotos de check-out están completas."""
        self._transition(BookingStatus.RETURNED, now)

    def close(self, now: datetime) -> None:
        """La liquidación del depósito terminó con éxito en la pasarela."""
        self._transition(BookingStatus.CLOSED, now)

    def cancel(self, now: datetime) -> None:
        self._transition(BookingStatus.CANCELLED, now)

    def _transition(self, target: BookingStatus, now: datetime) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            logger.error(
                "Invalid booking transition attempted",
                extra={
                    "booking_id": self.id,
                    "current_status": self.status.value,
                    "target_status": target.value,
                },
            )
            raise InvalidTransitionError(
                entity="booking",
                entity_id=self.id,
                current_status=self.status.value,
                target_status=target.value,
            )
        self.status = target
        self.updated_at = now
        self.lock_version += 1
