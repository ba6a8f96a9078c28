from fastapi import APIRouter, Depends

from app.api.auth import get_current_user_id
from app.api.dependencies import get_use_cases
from app.api.schemas.photos import AttachPhotoRequest, PhotoCheckResponse
from app.domain.entities.photo_check import PhotoPhase, VehicleSide

router = APIRouter()


@router.put("/bookings/{booking_id}/photos/{phase}/{side}", response_model=PhotoCheckResponse)
async def attach_photo(
    booking_id: str,
    phase: PhotoPhase,
    side: VehicleSide,
    payload: AttachPhotoRequest,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> PhotoCheckResponse:
    check = await use_cases["photo_gate"].attach(
        booking_id=booking_id,
        phase=phase,
        side=side,
        photo_ref=payload.photo_ref,
        user_id=user_id,
    )
    return PhotoCheckResponse.from_entity(check)


@router.delete("/bookings/{booking_id}/photos/{phase}/{side}", response_model=PhotoCheckResponse)
async def remove_photo(
    booking_id: str,
    phase: PhotoPhase,
    side: VehicleSide,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> PhotoCheckResponse:
    check = await use_cases["photo_gate"].remove(
        booking_id=booking_id,
        phase=phase,
        side=side,
        user_id=user_id,
    )
    return PhotoCheckResponse.from_entity(check)


@router.get("/bookings/{booking_id}/photos/{phase}", response_model=PhotoCheckResponse)
async def get_photo_check(
    booking_id: str,
    phase: PhotoPhase,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> PhotoCheckResponse:
    check = await use_cases["photo_gate"].get(booking_id=booking_id, phase=phase, user_id=user_id)
    return PhotoCheckResponse.from_entity(check)
