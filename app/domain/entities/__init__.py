"""Entidades del dominio de rentas de remolques."""

from app.domain.entities.booking import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
    PricingSnapshot,
    RentalType,
)
from app.domain.entities.damage_verdict import DamageLevel, DamageVerdict
from app.domain.entities.deposit_refund import (
    DepositRefund,
    HoldOperation,
    RefundStatus,
    RefundType,
)
from app.domain.entities.payment import (
    Payment,
    PaymentKind,
    PaymentStatus,
    map_provider_status,
)
from app.domain.entities.photo_check import (
    REQUIRED_SIDES,
    PhotoCheck,
    PhotoCheckStatus,
    PhotoPhase,
    VehicleSide,
)

__all__ = [
    # Booking
    "Booking",
    "BookingStatus",
    "RentalType",
    "PricingSnapshot",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    # Payment
    "Payment",
    "PaymentKind",
    "PaymentStatus",
    "map_provider_status",
    # PhotoCheck
    "PhotoCheck",
    "PhotoCheckStatus",
    "PhotoPhase",
    "VehicleSide",
    "REQUIRED_SIDES",
    # DamageVerdict
    "DamageVerdict",
    "DamageLevel",
    # DepositRefund
    "DepositRefund",
    "RefundType",
    "RefundStatus",
    "HoldOperation",
]
