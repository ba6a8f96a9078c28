from typing import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.damage_verdict_repo import DamageVerdictRepo
from app.domain.entities.damage_verdict import DamageLevel, DamageVerdict
from app.domain.entities.photo_check import VehicleSide
from app.infrastructure.db.tables import damage_verdicts


class DamageVerdictRepoSQL(DamageVerdictRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_by_booking(self, booking_id: str) -> Sequence[DamageVerdict]:
        stmt = select(damage_verdicts).where(damage_verdicts.c.booking_id == booking_id).order_by(damage_verdicts.c.id)
        rows = (await self._session.execute(stmt)).mappings().all()
        return [
            DamageVerdict(
                booking_id=row["booking_id"],
                side=VehicleSide(row["side"]),
                has_damage=row["has_damage"],
                level=DamageLevel(row["level"]),
                confidence=row["confidence"],
                assessed=row["assessed"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    async def save_many(self, verdicts: Sequence[DamageVerdict]) -> None:
        for verdict in verdicts:
            await self._session.execute(
                delete(damage_verdicts).where(
                    damage_verdicts.c.booking_id == verdict.booking_id,
                    damage_verdicts.c.side == verdict.side.value,
                )
            )
            await self._session.execute(
                insert(damage_verdicts).values(
                    booking_id=verdict.booking_id,
                    side=verdict.side.value,
                    has_damage=verdict.has_damage,
                    level=verdict.level.value,
                    confidence=verdict.confidence,
                    assessed=verdict.assessed,
                    created_at=verdict.created_at,
                )
            )
