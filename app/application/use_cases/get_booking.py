from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import Booking
from app.domain.errors import BookingAccessDeniedError, BookingNotFoundError


async def load_owned_booking(booking_repo: BookingRepo, booking_id: str, user_id: str | None) -> Booking:
    """Carga la reserva y valida que pertenezca a ``user_id`` (None = operador interno)."""
    booking = await booking_repo.get(booking_id)
    if not booking:
        raise BookingNotFoundError(booking_id)
    if user_id is not None and booking.user_id != user_id:
        raise BookingAccessDeniedError(booking_id)
    return booking


class GetBookingUseCase:
    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(self, booking_id: str, user_id: str | None) -> Booking:
        return await load_owned_booking(self._booking_repo, booking_id, user_id)


class ListBookingsUseCase:
    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(self, user_id: str) -> Sequence[Booking]:
        bookings = await self._booking_repo.list_by_user(user_id)
        return sorted(bookings, key=lambda b: b.start_time, reverse=True)
