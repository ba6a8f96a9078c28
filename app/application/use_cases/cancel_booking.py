import logging

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.get_booking import load_owned_booking
from app.application.use_cases.release_deposit_hold import ReleaseDepositHoldUseCase
from app.domain.entities.booking import Booking
from app.domain.entities.payment import PaymentKind, PaymentStatus


class CancelBookingUseCase:
    """
    Cancela una reserva en PENDING_PAYMENT o PAID y libera el remolque.

    No reembolsa la renta: un cargo PENDING/COMPLETED queda registrado para
    seguimiento del operador. Una retención de depósito COMPLETED se anula;
    una PENDING se deja expirar.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        clock: Clock,
        hold_release: ReleaseDepositHoldUseCase,
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._clock = clock
        self._hold_release = hold_release
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: str, user_id: str | None) -> Booking:
        async with self._locks.hold(f"booking:{booking_id}"):
            async with self._transaction_manager.start():
                booking = await load_owned_booking(self._booking_repo, booking_id, user_id)
                expected_lock_version = booking.lock_version
                booking.cancel(self._clock.now())
                saved = await self._booking_repo.save(booking, expected_lock_version=expected_lock_version)

                payments = await self._payment_repo.list_by_booking(booking_id)

        open_rental = [
            p
            for p in payments
            if p.kind == PaymentKind.RENTAL and p.status in (PaymentStatus.PENDING, PaymentStatus.COMPLETED)
        ]
        if open_rental:
            self._logger.warning(
                "Booking cancelled with rental charge outstanding; operator follow-up required",
                extra={
                    "booking_id": booking_id,
                    "payment_ids": [p.id for p in open_rental],
                },
            )
        await self._hold_release.execute(booking_id)
        self._logger.info("Booking cancelled", extra={"booking_id": booking_id})
        return saved
