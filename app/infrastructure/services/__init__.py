"""Servicios de infraestructura."""

from app.infrastructure.services.clock_impl import ClockImpl
from app.infrastructure.services.id_generator_impl import IdGeneratorImpl
from app.infrastructure.services.keyed_lock import AsyncioKeyedLock

__all__ = [
    "ClockImpl",
    "IdGeneratorImpl",
    "AsyncioKeyedLock",
]
