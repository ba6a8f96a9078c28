import logging
import random

from app.application.interfaces.damage_assessor import DamageAssessment, DamageAssessor
from app.domain.entities.damage_verdict import DamageLevel

logger = logging.getLogger(__name__)


class RandomDamageAssessor(DamageAssessor):
    """
    Placeholder until a real image-comparison service is wired in.

    Reports damage on 30% of sides; damaged sides are MINOR/MODERATE/SEVERE
    with weights 60/30/10 and confidence in [0.7, 1.0).
    """

    DAMAGE_PROBABILITY = 0.3
    LEVELS = (DamageLevel.MINOR, DamageLevel.MODERATE, DamageLevel.SEVERE)
    WEIGHTS = (0.6, 0.3, 0.1)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def assess(self, before_ref: str, after_ref: str) -> DamageAssessment:
        has_damage = self._rng.random() < self.DAMAGE_PROBABILITY
        level = self._rng.choices(self.LEVELS, weights=self.WEIGHTS)[0] if has_damage else DamageLevel.NONE
        confidence = round(0.7 + self._rng.random() * 0.3, 3)
        logger.info(
            "Photo comparison completed",
            extra={"before_ref": before_ref, "after_ref": after_ref, "level": level.value},
        )
        return DamageAssessment(has_damage=has_damage, level=level, confidence=min(confidence, 1.0))
