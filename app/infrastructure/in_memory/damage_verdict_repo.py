from typing import Sequence

from app.application.interfaces.damage_verdict_repo import DamageVerdictRepo
from app.domain.entities.damage_verdict import DamageVerdict
from app.domain.entities.photo_check import REQUIRED_SIDES, VehicleSide


class InMemoryDamageVerdictRepo(DamageVerdictRepo):
    def __init__(self) -> None:
        self.verdicts: dict[tuple[str, VehicleSide], DamageVerdict] = {}

    async def list_by_booking(self, booking_id: str) -> Sequence[DamageVerdict]:
        return [self.verdicts[(booking_id, side)] for side in REQUIRED_SIDES if (booking_id, side) in self.verdicts]

    async def save_many(self, verdicts: Sequence[DamageVerdict]) -> None:
        for verdict in verdicts:
            self.verdicts[(verdict.booking_id, verdict.side)] = verdict
