"""
Capa de Dominio - Pipeline de reservas de remolques.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.

Estructura:
- entities/: Entidades (Booking, Payment, PhotoCheck, DamageVerdict, DepositRefund)
- value_objects/: Objetos de valor inmutables (Money, DatetimeRange, OrderId)
- services/: Funciones puras (precios, regla de liquidación)
- events.py: Eventos de dominio
- errors.py: Excepciones específicas del dominio
"""

from app.domain.entities import (
    Booking,
    BookingStatus,
    DamageLevel,
    DamageVerdict,
    DepositRefund,
    HoldOperation,
    Payment,
    PaymentKind,
    PaymentStatus,
    PhotoCheck,
    PhotoCheckStatus,
    PhotoPhase,
    PricingSnapshot,
    RefundStatus,
    RefundType,
    RentalType,
    VehicleSide,
)
from app.domain.errors import (
    BookingAccessDeniedError,
    BookingNotFoundError,
    DepositRefundNotFoundError,
    DomainError,
    GatewayUnavailableError,
    InvalidSignatureError,
    InvalidTransitionError,
    InvalidWindowError,
    OptimisticLockError,
    PaymentAlreadyCompletedError,
    PaymentNotFoundError,
    PaymentRejectedError,
    PhotoNotFoundError,
    PhotoPhaseClosedError,
    SettlementFailedError,
    SlotUnavailableError,
    TrailerNotFoundError,
    UnknownPaymentError,
)
from app.domain.events import CheckoutCompleted, DomainEvent, PhotoCheckReopened
from app.domain.value_objects import DatetimeRange, Money, OrderId

__all__ = [
    # Entities
    "Booking",
    "BookingStatus",
    "RentalType",
    "PricingSnapshot",
    "Payment",
    "PaymentKind",
    "PaymentStatus",
    "PhotoCheck",
    "PhotoCheckStatus",
    "PhotoPhase",
    "VehicleSide",
    "DamageVerdict",
    "DamageLevel",
    "DepositRefund",
    "RefundType",
    "RefundStatus",
    "HoldOperation",
    # Events
    "DomainEvent",
    "CheckoutCompleted",
    "PhotoCheckReopened",
    # Value Objects
    "Money",
    "DatetimeRange",
    "OrderId",
    # Errors
    "DomainError",
    "BookingNotFoundError",
    "BookingAccessDeniedError",
    "InvalidWindowError",
    "SlotUnavailableError",
    "InvalidTransitionError",
    "OptimisticLockError",
    "TrailerNotFoundError",
    "PaymentNotFoundError",
    "PaymentAlreadyCompletedError",
    "PaymentRejectedError",
    "GatewayUnavailableError",
    "InvalidSignatureError",
    "UnknownPaymentError",
    "PhotoNotFoundError",
    "PhotoPhaseClosedError",
    "SettlementFailedError",
    "DepositRefundNotFoundError",
]
