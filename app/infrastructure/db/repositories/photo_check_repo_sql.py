from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.photo_check_repo import PhotoCheckRepo
from app.domain.entities.photo_check import PhotoCheck, PhotoPhase, VehicleSide
from app.infrastructure.db.tables import booking_photos


class PhotoCheckRepoSQL(PhotoCheckRepo):
    """Una fila por lado; el PhotoCheck se arma con las filas de (booking_id, phase)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, booking_id: str, phase: PhotoPhase) -> PhotoCheck | None:
        stmt = select(booking_photos).where(
            booking_photos.c.booking_id == booking_id,
            booking_photos.c.phase == phase.value,
        )
        rows = (await self._session.execute(stmt)).mappings().all()
        if not rows:
            return None
        return PhotoCheck(
            booking_id=booking_id,
            phase=phase,
            photos={VehicleSide(row["side"]): row["photo_ref"] for row in rows},
            created_at=min(row["created_at"] for row in rows),
            updated_at=max(row["updated_at"] for row in rows),
        )

    async def save(self, check: PhotoCheck) -> PhotoCheck:
        await self._session.execute(
            delete(booking_photos).where(
                booking_photos.c.booking_id == check.booking_id,
                booking_photos.c.phase == check.phase.value,
            )
        )
        if check.photos:
            await self._session.execute(
                insert(booking_photos),
                [
                    {
                        "booking_id": check.booking_id,
                        "phase": check.phase.value,
                        "side": side.value,
                        "photo_ref": ref,
                        "created_at": check.created_at or check.updated_at,
                        "updated_at": check.updated_at,
                    }
                    for side, ref in check.photos.items()
                ],
            )
        return check
