"""Implementaciones in-memory para testing."""

from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.damage_assessor import FixedDamageAssessor
from app.infrastructure.in_memory.damage_verdict_repo import InMemoryDamageVerdictRepo
from app.infrastructure.in_memory.deposit_refund_repo import InMemoryDepositRefundRepo
from app.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.photo_check_repo import InMemoryPhotoCheckRepo
from app.infrastructure.in_memory.photo_storage import InMemoryPhotoStorage
from app.infrastructure.in_memory.trailer_catalog import InMemoryTrailerCatalog
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager as InMemoryTransactionManager

__all__ = [
    # Repositories
    "InMemoryBookingRepo",
    "InMemoryPaymentRepo",
    "InMemoryPhotoCheckRepo",
    "InMemoryDamageVerdictRepo",
    "InMemoryDepositRefundRepo",
    "InMemoryTrailerCatalog",
    # Gateways
    "StubPaymentGateway",
    "InMemoryPhotoStorage",
    "FixedDamageAssessor",
    # Infrastructure
    "InMemoryTransactionManager",
]
