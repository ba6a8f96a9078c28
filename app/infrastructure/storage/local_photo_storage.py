import asyncio
from pathlib import Path

from app.application.interfaces.photo_storage import PhotoStorage
from app.domain.entities.photo_check import PhotoPhase, VehicleSide, photo_ref_belongs_to


class LocalPhotoStorage(PhotoStorage):
    """
    Fotos subidas al directorio de uploads bajo ``{booking_id}/{fase}/{LADO}...``.
    ``photo_ref`` es la ruta relativa al directorio; referencias de otra reserva,
    fase o lado, o que escapan del directorio, no existen.
    """

    def __init__(self, upload_dir: str) -> None:
        self._root = Path(upload_dir).resolve()

    async def photo_exists(self, booking_id: str, phase: PhotoPhase, side: VehicleSide, photo_ref: str) -> bool:
        if not photo_ref_belongs_to(booking_id, phase, side, photo_ref):
            return False
        candidate = (self._root / photo_ref).resolve()
        if self._root not in candidate.parents:
            return False
        return await asyncio.to_thread(candidate.is_file)
