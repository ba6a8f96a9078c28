import logging

from app.application.dtos.payment_dto import PaymentInitiationDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.payment_gateway import GatewayCallStatus, PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import IdGenerator
from app.application.use_cases.get_booking import load_owned_booking
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus
from app.domain.errors import (
    InvalidTransitionError,
    PaymentAlreadyCompletedError,
    PaymentRejectedError,
)
from app.domain.value_objects.order_id import OrderId

# Estados de la reserva en los que se acepta iniciar cada tipo de pago
_ACCEPTING_STATUSES: dict[PaymentKind, frozenset[BookingStatus]] = {
    PaymentKind.RENTAL: frozenset({BookingStatus.PENDING_PAYMENT}),
    PaymentKind.DEPOSIT_HOLD: frozenset({BookingStatus.PENDING_PAYMENT, BookingStatus.PAID}),
}

_DESCRIPTIONS = {
    PaymentKind.RENTAL: "Trailer rental payment {booking_id}",
    PaymentKind.DEPOSIT_HOLD: "Trailer deposit hold {booking_id}",
}


class CreatePaymentUseCase:
    """
    Inicia el cargo de renta o la retención del depósito de una reserva.

    El pago se escribe PENDING con su ``order_id`` antes de llamar a la
    pasarela. Si la pasarela no responde el pago queda PENDING sin
    ``gateway_payment_id`` y un reintento reutiliza el mismo ``order_id``.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        clock: Clock,
        id_generator: IdGenerator,
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._clock = clock
        self._id_generator = id_generator
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: str, kind: PaymentKind, user_id: str | None) -> PaymentInitiationDTO:
        async with self._locks.hold(f"payment-create:{booking_id}:{kind.value}"):
            async with self._transaction_manager.start():
                booking = await load_owned_booking(self._booking_repo, booking_id, user_id)
                payment = await self._payment_repo.find_latest(booking_id, kind)

                if payment and payment.status == PaymentStatus.COMPLETED:
                    raise PaymentAlreadyCompletedError(booking_id, kind.value)

                if payment and payment.status == PaymentStatus.PENDING and payment.gateway_payment_id:
                    self._logger.info(
                        "Reusing pending payment",
                        extra={"booking_id": booking_id, "payment_id": payment.id},
                    )
                    return PaymentInitiationDTO.from_payment(payment)

                if booking.status not in _ACCEPTING_STATUSES[kind]:
                    raise InvalidTransitionError(
                        entity="payment",
                        entity_id=booking_id,
                        current_status=booking.status.value,
                        target_status=kind.value,
                    )

                if not payment or payment.is_final:
                    payment = await self._payment_repo.create(self._new_payment(booking, kind))

            return await self._authorize(booking, payment)

    def _new_payment(self, booking: Booking, kind: PaymentKind) -> Payment:
        now = self._clock.now()
        amount = booking.total_amount if kind == PaymentKind.RENTAL else booking.deposit_amount
        return Payment(
            id=self._id_generator.new_id("pay"),
            booking_id=booking.id,
            order_id=OrderId.generate(kind.value, booking.id).value,
            kind=kind,
            amount=amount,
            currency_code=booking.pricing.currency_code,
            status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    async def _authorize(self, booking: Booking, payment: Payment) -> PaymentInitiationDTO:
        result = await self._payment_gateway.authorize(
            order_id=payment.order_id,
            amount=payment.amount,
            kind=payment.kind,
            customer_key=booking.user_id,
            description=_DESCRIPTIONS[payment.kind].format(booking_id=booking.id),
        )

        if result.status == GatewayCallStatus.UNAVAILABLE:
            self._logger.warning(
                "Gateway unavailable during authorize; payment left pending",
                extra={"payment_id": payment.id, "order_id": payment.order_id, "error": result.error_message},
            )
            return PaymentInitiationDTO.from_payment(payment, gateway_confirmed=False)

        async with self._transaction_manager.start():
            now = self._clock.now()
            if result.status == GatewayCallStatus.REJECTED:
                payment.fail(now, provider_status=result.provider_status or result.error_code)
                await self._payment_repo.save(payment)
                self._logger.warning(
                    "Gateway rejected payment",
                    extra={
                        "payment_id": payment.id,
                        "order_id": payment.order_id,
                        "error_code": result.error_code,
                        "error": result.error_message,
                    },
                )
            else:
                payment.attach_gateway_payment(result.gateway_payment_id, result.redirect_url, now)
                payment.provider_status = result.provider_status
                await self._payment_repo.save(payment)

        if payment.status == PaymentStatus.FAILED:
            raise PaymentRejectedError(booking.id, result.error_code, result.error_message)

        self._logger.info(
            "Payment created",
            extra={
                "payment_id": payment.id,
                "booking_id": booking.id,
                "kind": payment.kind.value,
                "gateway_payment_id": payment.gateway_payment_id,
                "amount": str(payment.amount),
            },
        )
        return PaymentInitiationDTO.from_payment(payment)
