from copy import deepcopy
from datetime import datetime, timezone
from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.errors import OptimisticLockError

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryBookingRepo(BookingRepo):
    def __init__(self) -> None:
        self.bookings: dict[str, Booking] = {}

    async def get(self, booking_id: str) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return deepcopy(booking) if booking else None

    async def list_by_user(self, user_id: str) -> Sequence[Booking]:
        return [deepcopy(b) for b in self.bookings.values() if b.user_id == user_id]

    async def list_blocking_for_trailer(self, trailer_id: str) -> Sequence[Booking]:
        return [
            deepcopy(b)
            for b in self.bookings.values()
            if b.trailer_id == trailer_id and b.blocks_availability
        ]

    async def list_by_status(self, status: BookingStatus, limit: int = 50) -> Sequence[Booking]:
        matching = sorted(
            (b for b in self.bookings.values() if b.status == status),
            key=lambda b: b.updated_at or b.created_at or _EPOCH,
        )
        return [deepcopy(b) for b in matching[:limit]]

    async def create(self, booking: Booking) -> Booking:
        if booking.id in self.bookings:
            raise ValueError("Booking id already exists")
        self.bookings[booking.id] = deepcopy(booking)
        return booking

    async def save(self, booking: Booking, expected_lock_version: int) -> Booking:
        stored = self.bookings.get(booking.id)
        if stored is None:
            raise ValueError("Booking not found")
        if stored.lock_version != expected_lock_version:
            raise OptimisticLockError(booking.id, expected_lock_version, stored.lock_version)
        self.bookings[booking.id] = deepcopy(booking)
        return booking
