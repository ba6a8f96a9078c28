from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.domain.entities.damage_verdict import DamageLevel


@dataclass(frozen=True)
class DamageAssessment:
    has_damage: bool
    level: DamageLevel
    confidence: float


class DamageAssessor(ABC):
    """Compara la foto de check-in con la de check-out de un mismo lado."""

    @abstractmethod
    async def assess(self, before_ref: str, after_ref: str) -> DamageAssessment:
        pass
