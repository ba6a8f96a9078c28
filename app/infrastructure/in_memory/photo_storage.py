from app.application.interfaces.photo_storage import PhotoStorage
from app.domain.entities.photo_check import PhotoPhase, VehicleSide, photo_ref_belongs_to


class InMemoryPhotoStorage(PhotoStorage):
    """Almacenamiento de pruebas: un ``photo_ref`` existe si fue registrado con ``put``."""

    def __init__(self) -> None:
        self.refs: set[str] = set()

    def put(self, photo_ref: str) -> str:
        self.refs.add(photo_ref)
        return photo_ref

    async def photo_exists(self, booking_id: str, phase: PhotoPhase, side: VehicleSide, photo_ref: str) -> bool:
        if not photo_ref_belongs_to(booking_id, phase, side, photo_ref):
            return False
        return photo_ref in self.refs
