from app.domain.entities.photo_check import PhotoPhase, VehicleSide


class PhotoStorage:
    """El binario de la foto vive fuera del servicio; aquí solo se valida que exista."""

    async def photo_exists(self, booking_id: str, phase: PhotoPhase, side: VehicleSide, photo_ref: str) -> bool:
        raise NotImplementedError
