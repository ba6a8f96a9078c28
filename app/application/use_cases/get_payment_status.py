import logging

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.get_booking import load_owned_booking
from app.application.use_cases.payment_reconciliation import PaymentStatusApplier
from app.application.use_cases.release_deposit_hold import ReleaseDepositHoldUseCase
from app.domain.entities.booking import BookingStatus
from app.domain.entities.payment import Payment
from app.domain.errors import PaymentNotFoundError


class GetPaymentStatusUseCase:
    """
    Devuelve el pago tras re-consultar la pasarela.

    El estado obtenido pasa por el mismo camino idempotente que el webhook;
    si la pasarela no responde se devuelve el estado guardado.
    """

    def __init__(
        self,
        payment_repo: PaymentRepo,
        booking_repo: BookingRepo,
        payment_gateway: PaymentGateway,
        applier: PaymentStatusApplier,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        hold_release: ReleaseDepositHoldUseCase,
    ) -> None:
        self._payment_repo = payment_repo
        self._booking_repo = booking_repo
        self._payment_gateway = payment_gateway
        self._applier = applier
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._hold_release = hold_release
        self._logger = logging.getLogger(__name__)

    async def execute(self, payment_id: str, user_id: str | None) -> Payment:
        payment = await self._payment_repo.get(payment_id)
        if not payment:
            raise PaymentNotFoundError(payment_id)
        await load_owned_booking(self._booking_repo, payment.booking_id, user_id)

        if not payment.gateway_payment_id:
            return payment

        result = await self._payment_gateway.query_status(payment.gateway_payment_id)
        if not result.ok:
            self._logger.info(
                "Gateway status query skipped",
                extra={"payment_id": payment_id, "gateway_status": result.status.value, "error": result.error_message},
            )
            return payment

        async with self._locks.hold(f"payment:{payment.gateway_payment_id}"):
            async with self._transaction_manager.start():
                current = await self._payment_repo.get(payment_id)
                outcome = await self._applier.apply(current, result.provider_status)

        if outcome.payment_changed and outcome.booking_status == BookingStatus.CANCELLED.value:
            if await self._hold_release.execute(outcome.booking_id):
                current = await self._payment_repo.get(payment_id)
        return current
