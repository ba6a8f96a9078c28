from typing import Sequence

from app.domain.entities.booking import Booking, BookingStatus


class BookingRepo:
    async def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    async def list_by_user(self, user_id: str) -> Sequence[Booking]:
        raise NotImplementedError

    async def list_blocking_for_trailer(self, trailer_id: str) -> Sequence[Booking]:
        """Reservas del remolque que aún bloquean disponibilidad (no CLOSED/CANCELLED)."""
        raise NotImplementedError

    async def list_by_status(self, status: BookingStatus, limit: int = 50) -> Sequence[Booking]:
        """Reservas en ``status``, las de actualización más antigua primero."""
        raise NotImplementedError

    async def create(self, booking: Booking) -> Booking:
        raise NotImplementedError

    async def save(self, booking: Booking, expected_lock_version: int) -> Booking:
        """
        Persiste el estado de la reserva con chequeo optimista.

        Raises:
            OptimisticLockError: si la versión guardada no es ``expected_lock_version``.
        """
        raise NotImplementedError
