"""Eventos de dominio publicados por el pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    occurred_at: datetime
    event_id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def event_type(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class CheckoutCompleted(DomainEvent):
    """Las cuatro fotos de check-out de una reserva quedaron completas."""

    booking_id: str = ""


@dataclass(frozen=True)
class PhotoCheckReopened(DomainEvent):
    """Se quitó una foto de una fase que estaba completa."""

    booking_id: str = ""
    phase: str = ""
