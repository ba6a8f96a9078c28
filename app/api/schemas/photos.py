from datetime import datetime

from pydantic import BaseModel, ConfigDict, constr

from app.domain.entities.photo_check import PhotoCheck, PhotoCheckStatus, PhotoPhase, VehicleSide


class AttachPhotoRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    photo_ref: constr(strip_whitespace=True, min_length=1)


class PhotoCheckResponse(BaseModel):
    booking_id: str
    phase: PhotoPhase
    status: PhotoCheckStatus
    photos: dict[VehicleSide, str]
    missing_sides: list[VehicleSide]
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, check: PhotoCheck) -> "PhotoCheckResponse":
        return cls(
            booking_id=check.booking_id,
            phase=check.phase,
            status=check.status,
            photos=dict(check.photos),
            missing_sides=check.missing_sides,
            updated_at=check.updated_at,
        )
