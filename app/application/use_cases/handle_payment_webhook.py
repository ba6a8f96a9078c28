import logging
from typing import Any

from app.application.dtos.payment_dto import WebhookOutcomeDTO
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.payment_reconciliation import PaymentStatusApplier
from app.application.use_cases.release_deposit_hold import ReleaseDepositHoldUseCase
from app.domain.entities.booking import BookingStatus
from app.domain.errors import InvalidSignatureError, UnknownPaymentError


class HandlePaymentWebhookUseCase:
    """
    Reconciliador de webhooks: único escritor autoritativo del estado de Payment.

    Las entregas pueden llegar duplicadas o desordenadas; se serializan por
    ``gateway_payment_id`` y se aplican de forma idempotente.
    """

    def __init__(
        self,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        applier: PaymentStatusApplier,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        hold_release: ReleaseDepositHoldUseCase,
    ) -> None:
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._applier = applier
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._hold_release = hold_release
        self._logger = logging.getLogger(__name__)

    async def execute(self, payload: dict[str, Any]) -> WebhookOutcomeDTO:
        gateway_payment_id = payload.get("PaymentId")
        gateway_payment_id = str(gateway_payment_id) if gateway_payment_id is not None else None

        if not self._payment_gateway.verify_notification(payload):
            self._logger.warning(
                "Webhook rejected: invalid signature",
                extra={"gateway_payment_id": gateway_payment_id, "order_id": payload.get("OrderId")},
            )
            raise InvalidSignatureError()

        if not gateway_payment_id:
            raise UnknownPaymentError(None)

        provider_status = payload.get("Status")
        async with self._locks.hold(f"payment:{gateway_payment_id}"):
            async with self._transaction_manager.start():
                payment = await self._payment_repo.find_by_gateway_payment_id(gateway_payment_id)
                if not payment:
                    self._logger.warning(
                        "Webhook for unknown payment",
                        extra={"gateway_payment_id": gateway_payment_id, "provider_status": provider_status},
                    )
                    raise UnknownPaymentError(gateway_payment_id)

                outcome = await self._applier.apply(payment, provider_status)

        if outcome.payment_changed and outcome.booking_status == BookingStatus.CANCELLED.value:
            await self._hold_release.execute(outcome.booking_id)
        return outcome
