"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock, FakeClock
from app.application.interfaces.damage_assessor import DamageAssessment, DamageAssessor
from app.application.interfaces.damage_verdict_repo import DamageVerdictRepo
from app.application.interfaces.deposit_refund_repo import DepositRefundRepo
from app.application.interfaces.event_publisher import EventHandler, EventPublisher
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_gateway import (
    GatewayCallStatus,
    GatewayResult,
    PaymentGateway,
)
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.photo_check_repo import PhotoCheckRepo
from app.application.interfaces.photo_storage import PhotoStorage
from app.application.interfaces.trailer_catalog import TrailerCatalog, TrailerRecord
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import (
    IdGenerator,
    SequentialIdGenerator,
)

__all__ = [
    # Repositories
    "BookingRepo",
    "PaymentRepo",
    "PhotoCheckRepo",
    "DamageVerdictRepo",
    "DepositRefundRepo",
    "TrailerCatalog",
    "TrailerRecord",
    # Gateways
    "PaymentGateway",
    "GatewayResult",
    "GatewayCallStatus",
    "DamageAssessor",
    "DamageAssessment",
    "PhotoStorage",
    # Infrastructure
    "TransactionManager",
    "KeyedLock",
    "EventPublisher",
    "EventHandler",
    # Utilities
    "Clock",
    "FakeClock",
    "IdGenerator",
    "SequentialIdGenerator",
]
