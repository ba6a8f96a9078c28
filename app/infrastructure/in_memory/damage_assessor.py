from app.application.interfaces.damage_assessor import DamageAssessment, DamageAssessor
from app.domain.entities.damage_verdict import DamageLevel


class FixedDamageAssessor(DamageAssessor):
    """
    Assessor determinista: devuelve el nivel configurado para cada foto de
    check-out (``after_ref``) y NONE para el resto.
    """

    def __init__(self, levels: dict[str, DamageLevel] | None = None, confidence: float = 0.9) -> None:
        self.levels: dict[str, DamageLevel] = dict(levels or {})
        self.confidence = confidence
        self.calls: list[tuple[str, str]] = []

    async def assess(self, before_ref: str, after_ref: str) -> DamageAssessment:
        self.calls.append((before_ref, after_ref))
        level = self.levels.get(after_ref, DamageLevel.NONE)
        return DamageAssessment(
            has_damage=level != DamageLevel.NONE,
            level=level,
            confidence=self.confidence,
        )
