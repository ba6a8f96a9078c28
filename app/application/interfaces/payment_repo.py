from typing import Sequence

from app.domain.entities.payment import Payment, PaymentKind


class PaymentRepo:
    async def create(self, payment: Payment) -> Payment:
        raise NotImplementedError

    async def save(self, payment: Payment) -> Payment:
        raise NotImplementedError

    async def get(self, payment_id: str) -> Payment | None:
        raise NotImplementedError

    async def find_by_gateway_payment_id(self, gateway_payment_id: str) -> Payment | None:
        raise NotImplementedError

    async def find_by_order_id(self, order_id: str) -> Payment | None:
        raise NotImplementedError

    async def list_by_booking(self, booking_id: str) -> Sequence[Payment]:
        raise NotImplementedError

    async def find_latest(self, booking_id: str, kind: PaymentKind) -> Payment | None:
        """Último pago de ese tipo para la reserva, por fecha de creación."""
        raise NotImplementedError
