"""Entidad DepositRefund - liquidación del depósito retenido de una reserva."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import InvalidTransitionError


class RefundType(str, Enum):
    FULL = "FULL"
    PARTIAL = "PARTIAL"
    NONE = "NONE"


class RefundStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class HoldOperation(str, Enum):
    """Dirección de la operación sobre la retención."""

    RETURN_TO_CUSTOMER = "RETURN_TO_CUSTOMER"
    RETAIN_FOR_MERCHANT = "RETAIN_FOR_MERCHANT"


_REFUND_TRANSITIONS: dict[RefundStatus, frozenset[RefundStatus]] = {
    RefundStatus.PENDING: frozenset({RefundStatus.PROCESSING}),
    RefundStatus.PROCESSING: frozenset({RefundStatus.COMPLETED, RefundStatus.FAILED}),
    RefundStatus.FAILED: frozenset({RefundStatus.PROCESSING}),
    RefundStatus.COMPLETED: frozenset(),
}


@dataclass
class DepositRefund:
    """
    Liquidación del depósito. Exactamente una por reserva.

    ``refund_amount`` siempre expresa lo que vuelve al cliente;
    ``retained_amount`` lo que captura el comercio.
    """

    id: str
    booking_id: str
    original_hold_id: str
    refund_type: RefundType
    refund_amount: Decimal
    deposit_amount: Decimal
    operation: HoldOperation
    damage_amount: Decimal | None = None
    reason: str = ""
    status: RefundStatus = RefundStatus.PENDING
    attempts: int = 0
    failure_message: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def retained_amount(self) -> Decimal:
        return self.deposit_amount - self.refund_amount

    @property
    def is_completed(self) -> bool:
        return self.status == RefundStatus.COMPLETED

    @property
    def is_retryable(self) -> bool:
        return self.status in (RefundStatus.FAILED, RefundStatus.PROCESSING)

    def start_processing(self) -> None:
        """Marcador escrito antes de llamar a la pasarela."""
        self._transition(RefundStatus.PROCESSING)
        self.attempts += 1
        self.failure_message = None

    def complete(self, now: datetime) -> None:
        self._transition(RefundStatus.COMPLETED)
        self.completed_at = now

    def fail(self, message: str | None) -> None:
        self._transition(RefundStatus.FAILED)
        self.failure_message = message

    def _transition(self, target: RefundStatus) -> None:
        if target not in _REFUND_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                entity="deposit_refund",
                entity_id=self.id,
                current_status=self.status.value,
                target_status=target.value,
            )
        self.status = target
