"""Entidad DamageVerdict - resultado de comparar antes/después de un lado."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from app.domain.entities.photo_check import VehicleSide


class DamageLevel(str, Enum):
    NONE = "NONE"
    MINOR = "MINOR"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"


@dataclass(frozen=True)
class DamageVerdict:
    """
    Veredicto de daño de un lado del remolque.

    ``assessed`` es False cuando faltaba la foto de check-in: el lado se
    trata como NONE con confianza 0 en lugar de bloquear la liquidación.
    """

    booking_id: str
    side: VehicleSide
    has_damage: bool
    level: DamageLevel
    confidence: float
    assessed: bool = True
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence fuera de [0, 1]: {self.confidence}")
        if self.has_damage != (self.level != DamageLevel.NONE):
            raise ValueError(f"has_damage={self.has_damage} incoherente con level={self.level.value}")

    @classmethod
    def not_assessable(cls, booking_id: str, side: VehicleSide, now: datetime | None = None) -> "DamageVerdict":
        """Veredicto para un lado sin foto de check-in."""
        return cls(
            booking_id=booking_id,
            side=side,
            has_damage=False,
            level=DamageLevel.NONE,
            confidence=0.0,
            assessed=False,
            created_at=now,
        )
