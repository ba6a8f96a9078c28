from typing import Sequence

from app.domain.entities.damage_verdict import DamageVerdict


class DamageVerdictRepo:
    async def list_by_booking(self, booking_id: str) -> Sequence[DamageVerdict]:
        raise NotImplementedError

    async def save_many(self, verdicts: Sequence[DamageVerdict]) -> None:
        """Guarda un veredicto por lado; un lado ya evaluado se sobrescribe."""
        raise NotImplementedError
