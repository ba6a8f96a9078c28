from fastapi import APIRouter, Depends, status

from app.api.auth import get_current_user_id
from app.api.dependencies import get_use_cases
from app.api.schemas.bookings import (
    BookingResponse,
    CreateBookingRequest,
    DamageVerdictResponse,
    DepositRefundResponse,
    QuoteRequest,
    QuoteResponse,
)
from app.application.dtos.booking_dto import CreateBookingDTO, QuoteDTO

router = APIRouter()


@router.post("/bookings/quote", response_model=QuoteResponse, status_code=status.HTTP_200_OK)
async def quote_booking(
    payload: QuoteRequest,
    use_cases=Depends(get_use_cases),
) -> QuoteResponse:
    breakdown = await use_cases["quote"].execute(
        QuoteDTO(
            trailer_id=payload.trailer_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
            rental_type=payload.rental_type,
            add_ons=[a.value for a in payload.add_ons],
        )
    )
    return QuoteResponse.from_breakdown(breakdown)


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: CreateBookingRequest,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["create_booking"].execute(
        CreateBookingDTO(
            user_id=user_id,
            trailer_id=payload.trailer_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
            rental_type=payload.rental_type,
            add_ons=[a.value for a in payload.add_ons],
        )
    )
    return BookingResponse.from_entity(booking)


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings(
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> list[BookingResponse]:
    bookings = await use_cases["list_bookings"].execute(user_id=user_id)
    return [BookingResponse.from_entity(b) for b in bookings]


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["get_booking"].execute(booking_id=booking_id, user_id=user_id)
    return BookingResponse.from_entity(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["cancel_booking"].execute(booking_id=booking_id, user_id=user_id)
    return BookingResponse.from_entity(booking)


@router.get("/bookings/{booking_id}/deposit-refund", response_model=DepositRefundResponse)
async def get_deposit_refund(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> DepositRefundResponse:
    refund = await use_cases["get_deposit_refund"].execute(booking_id=booking_id, user_id=user_id)
    return DepositRefundResponse.from_entity(refund)


@router.get("/bookings/{booking_id}/damage-verdicts", response_model=list[DamageVerdictResponse])
async def list_damage_verdicts(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> list[DamageVerdictResponse]:
    verdicts = await use_cases["list_damage_verdicts"].execute(booking_id=booking_id, user_id=user_id)
    return [DamageVerdictResponse.from_entity(v) for v in verdicts]
