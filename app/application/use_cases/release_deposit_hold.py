import logging

from app.application.interfaces.clock import Clock
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus


class ReleaseDepositHoldUseCase:
    """
    Anula la retención de depósito COMPLETED de una reserva cancelada.

    Una retención puede completarse mientras la reserva sigue en
    PENDING_PAYMENT; si luego la reserva se cancela, el dinero retenido
    se devuelve al cliente. Fuera de ese caso no hace nada.
    """

    def __init__(
        self,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        clock: Clock,
    ) -> None:
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: str) -> Payment | None:
        hold = await self._payment_repo.find_latest(booking_id, PaymentKind.DEPOSIT_HOLD)
        if not hold or not hold.gateway_payment_id or hold.status != PaymentStatus.COMPLETED:
            return None

        async with self._locks.hold(f"payment:{hold.gateway_payment_id}"):
            current = await self._payment_repo.find_by_gateway_payment_id(hold.gateway_payment_id)
            if not current or current.status != PaymentStatus.COMPLETED:
                return None

            result = await self._payment_gateway.return_to_customer(current.gateway_payment_id)
            if not result.ok:
                self._logger.error(
                    "Could not void deposit hold of cancelled booking; operator follow-up required",
                    extra={
                        "booking_id": booking_id,
                        "payment_id": current.id,
                        "gateway_status": result.status.value,
                        "error": result.error_message,
                    },
                )
                return None

            async with self._transaction_manager.start():
                current.apply_status(PaymentStatus.CANCELLED, result.provider_status or "CANCELLED", self._clock.now())
                await self._payment_repo.save(current)

        self._logger.info(
            "Deposit hold voided for cancelled booking",
            extra={"booking_id": booking_id, "payment_id": current.id},
        )
        return current
