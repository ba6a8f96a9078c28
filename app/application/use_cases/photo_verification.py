"""
Compuerta de verificación fotográfica.

Cada fase (check-in / check-out) exige una foto por lado. Cuando el
check-out queda completo se publica ``CheckoutCompleted``.
"""

import logging

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.event_publisher import EventPublisher
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.photo_check_repo import PhotoCheckRepo
from app.application.interfaces.photo_storage import PhotoStorage
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.get_booking import load_owned_booking
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.photo_check import PhotoCheck, PhotoPhase, VehicleSide
from app.domain.errors import PhotoNotFoundError, PhotoPhaseClosedError
from app.domain.events import CheckoutCompleted, DomainEvent, PhotoCheckReopened

# Estados de la reserva en los que cada fase acepta cambios
PHASE_OPEN_STATUSES: dict[PhotoPhase, frozenset[BookingStatus]] = {
    PhotoPhase.CHECK_IN: frozenset({BookingStatus.PAID, BookingStatus.ACTIVE}),
    PhotoPhase.CHECK_OUT: frozenset({BookingStatus.ACTIVE}),
}


class PhotoVerificationGate:
    def __init__(
        self,
        booking_repo: BookingRepo,
        photo_check_repo: PhotoCheckRepo,
        photo_storage: PhotoStorage,
        event_publisher: EventPublisher,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._photo_check_repo = photo_check_repo
        self._photo_storage = photo_storage
        self._event_publisher = event_publisher
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def attach(
        self,
        booking_id: str,
        phase: PhotoPhase,
        side: VehicleSide,
        photo_ref: str,
        user_id: str | None = None,
    ) -> PhotoCheck:
        """
        Sube o reemplaza la foto de un lado.

        Raises:
            PhotoPhaseClosedError: si la reserva no acepta fotos de esa fase.
            PhotoNotFoundError: si ``photo_ref`` no existe en el almacenamiento.
        """
        booking = await load_owned_booking(self._booking_repo, booking_id, user_id)
        self._ensure_phase_open(booking, phase)

        if not await self._photo_storage.photo_exists(booking_id, phase, side, photo_ref):
            raise PhotoNotFoundError(booking_id, phase.value, side.value)

        event: DomainEvent | None = None
        async with self._locks.hold(f"photos:{booking_id}:{phase.value}"):
            async with self._transaction_manager.start():
                now = self._clock.now()
                check = await self._photo_check_repo.get(booking_id, phase)
                if not check:
                    check = PhotoCheck(booking_id=booking_id, phase=phase, created_at=now)
                was_complete = check.is_complete

                check.attach(side, photo_ref, now)
                check = await self._photo_check_repo.save(check)

                if phase == PhotoPhase.CHECK_OUT and check.is_complete and not was_complete:
                    event = CheckoutCompleted(occurred_at=now, booking_id=booking_id)

        self._logger.info(
            "Photo attached",
            extra={
                "booking_id": booking_id,
                "phase": phase.value,
                "side": side.value,
                "status": check.status.value,
            },
        )
        if event:
            await self._event_publisher.publish(event)
        return check

    async def remove(
        self,
        booking_id: str,
        phase: PhotoPhase,
        side: VehicleSide,
        user_id: str | None = None,
    ) -> PhotoCheck:
        booking = await load_owned_booking(self._booking_repo, booking_id, user_id)
        self._ensure_phase_open(booking, phase)

        event: DomainEvent | None = None
        async with self._locks.hold(f"photos:{booking_id}:{phase.value}"):
            async with self._transaction_manager.start():
                now = self._clock.now()
                check = await self._photo_check_repo.get(booking_id, phase)
                if not check or check.photo_for(side) is None:
                    raise PhotoNotFoundError(booking_id, phase.value, side.value)
                was_complete = check.is_complete

                check.remove(side, now)
                check = await self._photo_check_repo.save(check)

                if was_complete:
                    event = PhotoCheckReopened(occurred_at=now, booking_id=booking_id, phase=phase.value)

        self._logger.info(
            "Photo removed",
            extra={"booking_id": booking_id, "phase": phase.value, "side": side.value},
        )
        if event:
            await self._event_publisher.publish(event)
        return check

    async def get(self, booking_id: str, phase: PhotoPhase, user_id: str | None = None) -> PhotoCheck:
        """Retorna el juego de fotos; uno vacío (MISSING) si aún no se subió nada."""
        await load_owned_booking(self._booking_repo, booking_id, user_id)
        check = await self._photo_check_repo.get(booking_id, phase)
        return check or PhotoCheck(booking_id=booking_id, phase=phase)

    async def is_complete(self, booking_id: str, phase: PhotoPhase) -> bool:
        check = await self._photo_check_repo.get(booking_id, phase)
        return bool(check and check.is_complete)

    def _ensure_phase_open(self, booking: Booking, phase: PhotoPhase) -> None:
        if booking.status not in PHASE_OPEN_STATUSES[phase]:
            raise PhotoPhaseClosedError(booking.id, phase.value, booking.status.value)
