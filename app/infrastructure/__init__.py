"""
Capa de Infraestructura - Pipeline de reservas de remolques.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).
Incluye adaptadores para bases de datos, la pasarela de pagos y servicios.

Estructura:
- db/: Tablas, repositorios SQL, transacciones y reintento por deadlock
- gateways/: Pasarela de pagos (HTTP + firma) y evaluador de daños
- in_memory/: Implementaciones in-memory para testing y modo local
- messaging/: Bus de eventos de dominio en proceso
- storage/: Validación de fotos subidas
- services/: Servicios de infraestructura (Clock, IDs, candados por llave)
"""

# Database
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.damage_verdict_repo_sql import DamageVerdictRepoSQL
from app.infrastructure.db.repositories.deposit_refund_repo_sql import DepositRefundRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.photo_check_repo_sql import PhotoCheckRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# Gateways
from app.infrastructure.gateways.damage_assessor_random import RandomDamageAssessor
from app.infrastructure.gateways.payment_gateway_http import PaymentGatewayHTTP

# Messaging
from app.infrastructure.messaging.event_bus import InProcessEventBus

# Services
from app.infrastructure.services.clock_impl import ClockImpl
from app.infrastructure.services.id_generator_impl import IdGeneratorImpl
from app.infrastructure.services.keyed_lock import AsyncioKeyedLock
from app.infrastructure.storage.local_photo_storage import LocalPhotoStorage

__all__ = [
    # Database - Repositories SQL
    "BookingRepoSQL",
    "PaymentRepoSQL",
    "PhotoCheckRepoSQL",
    "DamageVerdictRepoSQL",
    "DepositRefundRepoSQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "PaymentGatewayHTTP",
    "RandomDamageAssessor",
    # Messaging
    "InProcessEventBus",
    # Storage
    "LocalPhotoStorage",
    # Services
    "ClockImpl",
    "IdGeneratorImpl",
    "AsyncioKeyedLock",
]
