from app.domain.entities.photo_check import PhotoCheck, PhotoPhase


class PhotoCheckRepo:
    async def get(self, booking_id: str, phase: PhotoPhase) -> PhotoCheck | None:
        raise NotImplementedError

    async def save(self, check: PhotoCheck) -> PhotoCheck:
        """Upsert del juego de fotos completo para (booking_id, phase)."""
        raise NotImplementedError
