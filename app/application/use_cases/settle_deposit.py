"""
Motor de liquidación del depósito.

Al completarse el check-out: ACTIVE -> RETURNED, evaluación de daño de los
cuatro lados, decisión FULL/PARTIAL/NONE y operación sobre la retención.
La reserva solo pasa a CLOSED cuando la pasarela confirma la operación.
"""

import asyncio
import logging

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.damage_assessor import DamageAssessor
from app.application.interfaces.damage_verdict_repo import DamageVerdictRepo
from app.application.interfaces.deposit_refund_repo import DepositRefundRepo
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_gateway import GatewayCallStatus, GatewayResult, PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.photo_check_repo import PhotoCheckRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import IdGenerator
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.damage_verdict import DamageVerdict
from app.domain.entities.deposit_refund import DepositRefund, HoldOperation, RefundStatus
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus
from app.domain.entities.photo_check import REQUIRED_SIDES, PhotoCheck, PhotoPhase, VehicleSide
from app.domain.errors import (
    BookingNotFoundError,
    DepositRefundNotFoundError,
    SettlementFailedError,
)
from app.domain.events import CheckoutCompleted, DomainEvent
from app.domain.services.settlement_policy import DamageCostTable, decide_settlement

# Estados de la pasarela que confirman que la operación sobre la retención ya ocurrió
_OPERATION_DONE_STATUSES: dict[HoldOperation, frozenset[str]] = {
    HoldOperation.RETURN_TO_CUSTOMER: frozenset({"CANCELLED", "CANCELED", "REVERSED"}),
    # La retención ya reporta CONFIRMED antes de la captura: siempre se reemite
    HoldOperation.RETAIN_FOR_MERCHANT: frozenset(),
}


class DepositSettlementEngine:
    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        photo_check_repo: PhotoCheckRepo,
        damage_verdict_repo: DamageVerdictRepo,
        deposit_refund_repo: DepositRefundRepo,
        damage_assessor: DamageAssessor,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        clock: Clock,
        id_generator: IdGenerator,
        cost_table: DamageCostTable | None = None,
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._photo_check_repo = photo_check_repo
        self._damage_verdict_repo = damage_verdict_repo
        self._deposit_refund_repo = deposit_refund_repo
        self._damage_assessor = damage_assessor
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._clock = clock
        self._id_generator = id_generator
        self._cost_table = cost_table or DamageCostTable()
        self._logger = logging.getLogger(__name__)

    async def on_checkout_completed(self, event: DomainEvent) -> None:
        """Suscriptor de ``CheckoutCompleted``."""
        if isinstance(event, CheckoutCompleted):
            await self.process_return(event.booking_id)

    async def process_return(self, booking_id: str) -> DepositRefund | None:
        """
        Cierra la renta tras el check-out.

        Un segundo disparo con la liquidación ya creada no hace nada y
        retorna la existente.
        """
        async with self._locks.hold(f"booking:{booking_id}"):
            existing = await self._deposit_refund_repo.get_by_booking(booking_id)
            if existing:
                self._logger.info(
                    "Settlement already exists; trigger ignored",
                    extra={"booking_id": booking_id, "refund_status": existing.status.value},
                )
                return existing

            async with self._transaction_manager.start():
                booking = await self._get_booking(booking_id)
                if booking.status == BookingStatus.ACTIVE:
                    expected_lock_version = booking.lock_version
                    booking.mark_returned(self._clock.now())
                    booking = await self._booking_repo.save(booking, expected_lock_version=expected_lock_version)
                elif booking.status != BookingStatus.RETURNED:
                    self._logger.warning(
                        "Checkout completed for booking not in ACTIVE; settlement skipped",
                        extra={"booking_id": booking_id, "booking_status": booking.status.value},
                    )
                    return None

            return await self._assess_and_settle(booking)

    async def reconcile(self, booking_id: str) -> DepositRefund:
        """
        Reintenta una liquidación FAILED o resuelve una PROCESSING consultando
        primero el estado de la retención en la pasarela.
        """
        async with self._locks.hold(f"booking:{booking_id}"):
            refund = await self._deposit_refund_repo.get_by_booking(booking_id)
            if not refund:
                booking = await self._get_booking(booking_id)
                if booking.status != BookingStatus.RETURNED:
                    raise DepositRefundNotFoundError(booking_id)
                return await self._assess_and_settle(booking)

            if refund.is_completed:
                return refund

            if refund.status == RefundStatus.PROCESSING:
                state = await self._payment_gateway.query_status(refund.original_hold_id)
                if state.status == GatewayCallStatus.UNAVAILABLE:
                    self._logger.warning(
                        "Gateway unavailable while reconciling settlement",
                        extra={"booking_id": booking_id, "refund_id": refund.id},
                    )
                    return refund
                if (state.provider_status or "").upper() in _OPERATION_DONE_STATUSES[refund.operation]:
                    self._logger.info(
                        "Settlement confirmed by gateway status query",
                        extra={"booking_id": booking_id, "provider_status": state.provider_status},
                    )
                    return await self._apply_result(refund, state)
                # La operación no llegó al proveedor: se reemite con el mismo hold
                result = await self._execute_operation(refund)
                return await self._apply_result(refund, result)

            async with self._transaction_manager.start():
                refund.start_processing()
                await self._deposit_refund_repo.save(refund)
            self._logger.info(
                "Retrying failed settlement",
                extra={"booking_id": booking_id, "refund_id": refund.id, "attempt": refund.attempts},
            )
            result = await self._execute_operation(refund)
            return await self._apply_result(refund, result)

    async def reconcile_pending(self, limit: int = 50) -> int:
        """
        Barre las liquidaciones FAILED o PROCESSING y las reservas RETURNED
        que quedaron sin liquidación (p. ej. el evaluador falló en el check-out).
        Retorna cuántas quedaron COMPLETED.
        """
        refunds = await self._deposit_refund_repo.list_retryable(limit=limit)
        booking_ids = [refund.booking_id for refund in refunds]
        for booking in await self._booking_repo.list_by_status(BookingStatus.RETURNED, limit=limit):
            if booking.id in booking_ids:
                continue
            if await self._deposit_refund_repo.get_by_booking(booking.id) is None:
                booking_ids.append(booking.id)

        completed = 0
        for booking_id in booking_ids:
            try:
                refund = await self.reconcile(booking_id)
            except Exception as e:
                self._logger.error(
                    "Error reconciling settlement",
                    exc_info=e,
                    extra={"booking_id": booking_id},
                )
                continue
            if refund.is_completed:
                completed += 1
        return completed

    async def _assess_and_settle(self, booking: Booking) -> DepositRefund:
        verdicts = await self._assess(booking.id)
        async with self._transaction_manager.start():
            await self._damage_verdict_repo.save_many(verdicts)

        hold = await self._find_completed_hold(booking.id)
        if not hold:
            self._logger.error(
                "SettlementFailed: no completed deposit hold",
                extra={"booking_id": booking.id},
            )
            raise SettlementFailedError(booking.id, "no completed deposit hold")

        decision = decide_settlement(verdicts, booking.deposit_amount, self._cost_table)
        now = self._clock.now()
        refund = DepositRefund(
            id=self._id_generator.new_id("ref"),
            booking_id=booking.id,
            original_hold_id=hold.gateway_payment_id,
            refund_type=decision.refund_type,
            refund_amount=decision.refund_amount,
            deposit_amount=booking.deposit_amount,
            operation=decision.operation,
            damage_amount=decision.damage_amount,
            reason=decision.reason,
            status=RefundStatus.PENDING,
            created_at=now,
        )
        async with self._transaction_manager.start():
            refund = await self._deposit_refund_repo.create(refund)
        async with self._transaction_manager.start():
            refund.start_processing()
            refund = await self._deposit_refund_repo.save(refund)

        self._logger.info(
            "Settlement decided",
            extra={
                "booking_id": booking.id,
                "refund_type": refund.refund_type.value,
                "refund_amount": str(refund.refund_amount),
                "retained_amount": str(refund.retained_amount),
            },
        )
        result = await self._execute_operation(refund)
        return await self._apply_result(refund, result)

    async def _assess(self, booking_id: str) -> list[DamageVerdict]:
        check_in = await self._photo_check_repo.get(booking_id, PhotoPhase.CHECK_IN)
        check_out = await self._photo_check_repo.get(booking_id, PhotoPhase.CHECK_OUT)
        return list(
            await asyncio.gather(*(self._assess_side(booking_id, side, check_in, check_out) for side in REQUIRED_SIDES))
        )

    async def _assess_side(
        self,
        booking_id: str,
        side: VehicleSide,
        check_in: PhotoCheck | None,
        check_out: PhotoCheck | None,
    ) -> DamageVerdict:
        before = check_in.photo_for(side) if check_in else None
        after = check_out.photo_for(side) if check_out else None
        now = self._clock.now()
        if not before or not after:
            self._logger.warning(
                "Side not assessable: missing photo",
                extra={"booking_id": booking_id, "side": side.value, "has_before": bool(before)},
            )
            return DamageVerdict.not_assessable(booking_id, side, now)

        assessment = await self._damage_assessor.assess(before, after)
        return DamageVerdict(
            booking_id=booking_id,
            side=side,
            has_damage=assessment.has_damage,
            level=assessment.level,
            confidence=assessment.confidence,
            created_at=now,
        )

    async def _find_completed_hold(self, booking_id: str) -> Payment | None:
        payments = await self._payment_repo.list_by_booking(booking_id)
        holds = [
            p
            for p in payments
            if p.kind == PaymentKind.DEPOSIT_HOLD and p.status == PaymentStatus.COMPLETED and p.gateway_payment_id
        ]
        return holds[-1] if holds else None

    async def _execute_operation(self, refund: DepositRefund) -> GatewayResult:
        if refund.operation == HoldOperation.RETURN_TO_CUSTOMER:
            return await self._payment_gateway.return_to_customer(refund.original_hold_id)
        return await self._payment_gateway.retain_for_merchant(refund.original_hold_id, refund.retained_amount)

    async def _apply_result(self, refund: DepositRefund, result: GatewayResult) -> DepositRefund:
        if result.status == GatewayCallStatus.UNAVAILABLE:
            self._logger.warning(
                "Gateway unavailable during settlement; refund pending",
                extra={"booking_id": refund.booking_id, "refund_id": refund.id, "error": result.error_message},
            )
            return refund

        async with self._transaction_manager.start():
            now = self._clock.now()
            if result.status == GatewayCallStatus.REJECTED:
                refund.fail(result.error_message or result.error_code)
                refund = await self._deposit_refund_repo.save(refund)
                self._logger.error(
                    "SettlementFailed: gateway rejected deposit operation",
                    extra={
                        "booking_id": refund.booking_id,
                        "refund_id": refund.id,
                        "operation": refund.operation.value,
                        "error_code": result.error_code,
                        "error": result.error_message,
                    },
                )
                return refund

            refund.complete(now)
            refund = await self._deposit_refund_repo.save(refund)

            if refund.operation == HoldOperation.RETURN_TO_CUSTOMER:
                hold = await self._payment_repo.find_by_gateway_payment_id(refund.original_hold_id)
                if hold and hold.apply_status(PaymentStatus.CANCELLED, result.provider_status, now):
                    await self._payment_repo.save(hold)

            booking = await self._get_booking(refund.booking_id)
            if booking.status == BookingStatus.RETURNED:
                expected_lock_version = booking.lock_version
                booking.close(now)
                await self._booking_repo.save(booking, expected_lock_version=expected_lock_version)

        self._logger.info(
            "Deposit settled",
            extra={
                "booking_id": refund.booking_id,
                "refund_type": refund.refund_type.value,
                "refund_amount": str(refund.refund_amount),
            },
        )
        return refund

    async def _get_booking(self, booking_id: str) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking
