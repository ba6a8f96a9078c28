"""
Aplicación idempotente de un estado de pasarela a un Payment y su Booking.

La usan el webhook y la consulta de estado; el llamador debe sostener el
candado ``payment:<gateway_payment_id>`` y una transacción abierta.
"""

import logging

from app.application.dtos.payment_dto import WebhookOutcomeDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus, map_provider_status
from app.domain.errors import BookingNotFoundError

logger = logging.getLogger(__name__)


class PaymentStatusApplier:
    def __init__(self, payment_repo: PaymentRepo, booking_repo: BookingRepo, clock: Clock) -> None:
        self._payment_repo = payment_repo
        self._booking_repo = booking_repo
        self._clock = clock

    async def apply(self, payment: Payment, provider_status: str | None) -> WebhookOutcomeDTO:
        target = map_provider_status(provider_status)
        now = self._clock.now()

        if target == PaymentStatus.PENDING and payment.is_final:
            logger.warning(
                "Ignoring status regression for final payment",
                extra={
                    "payment_id": payment.id,
                    "current_status": payment.status.value,
                    "provider_status": provider_status,
                },
            )
            return self._outcome(payment, changed=False)

        if not payment.apply_status(target, provider_status, now):
            logger.info(
                "Payment status unchanged",
                extra={"payment_id": payment.id, "status": payment.status.value, "provider_status": provider_status},
            )
            return self._outcome(payment, changed=False)

        await self._payment_repo.save(payment)
        logger.info(
            "Payment status updated",
            extra={
                "payment_id": payment.id,
                "booking_id": payment.booking_id,
                "kind": payment.kind.value,
                "status": payment.status.value,
            },
        )

        booking = await self._booking_repo.get(payment.booking_id)
        if not booking:
            raise BookingNotFoundError(payment.booking_id)

        expected_lock_version = booking.lock_version
        self._drive_booking(booking, payment, now)
        if booking.lock_version != expected_lock_version and payment.kind == PaymentKind.RENTAL:
            await self._replay_buffered_deposit(booking, now)

        if booking.lock_version != expected_lock_version:
            booking = await self._booking_repo.save(booking, expected_lock_version=expected_lock_version)

        return self._outcome(payment, changed=True, booking=booking)

    def _drive_booking(self, booking: Booking, payment: Payment, now) -> None:
        if payment.status == PaymentStatus.COMPLETED:
            expected = BookingStatus.PENDING_PAYMENT if payment.kind == PaymentKind.RENTAL else BookingStatus.PAID
            if booking.status == expected:
                if payment.kind == PaymentKind.RENTAL:
                    booking.mark_paid(now)
                else:
                    booking.activate(now)
            elif payment.kind == PaymentKind.DEPOSIT_HOLD and booking.status == BookingStatus.PENDING_PAYMENT:
                logger.info(
                    "Deposit hold completed before rental charge; buffered until booking is PAID",
                    extra={"booking_id": booking.id, "payment_id": payment.id},
                )
            else:
                logger.warning(
                    "Payment completed for booking in unexpected state; manual reconciliation required",
                    extra={
                        "booking_id": booking.id,
                        "payment_id": payment.id,
                        "kind": payment.kind.value,
                        "booking_status": booking.status.value,
                    },
                )
            return

        if payment.kind == PaymentKind.RENTAL and booking.status == BookingStatus.PENDING_PAYMENT:
            booking.cancel(now)
            logger.info(
                "Rental charge did not complete; booking cancelled",
                extra={"booking_id": booking.id, "payment_id": payment.id, "status": payment.status.value},
            )
            return

        logger.warning(
            "Payment %s for booking left untouched",
            payment.status.value,
            extra={
                "booking_id": booking.id,
                "payment_id": payment.id,
                "kind": payment.kind.value,
                "booking_status": booking.status.value,
            },
        )

    async def _replay_buffered_deposit(self, booking: Booking, now) -> None:
        if booking.status != BookingStatus.PAID:
            return
        hold = await self._payment_repo.find_latest(booking.id, PaymentKind.DEPOSIT_HOLD)
        if hold and hold.status == PaymentStatus.COMPLETED:
            booking.activate(now)
            logger.info(
                "Replayed buffered deposit completion",
                extra={"booking_id": booking.id, "payment_id": hold.id},
            )

    def _outcome(self, payment: Payment, changed: bool, booking: Booking | None = None) -> WebhookOutcomeDTO:
        return WebhookOutcomeDTO(
            payment_id=payment.id,
            booking_id=payment.booking_id,
            payment_status=payment.status,
            payment_changed=changed,
            booking_status=booking.status.value if booking else None,
        )
