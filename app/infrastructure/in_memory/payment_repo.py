from copy import deepcopy
from typing import Sequence

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment, PaymentKind


class InMemoryPaymentRepo(PaymentRepo):
    def __init__(self) -> None:
        self.payments: dict[str, Payment] = {}

    async def create(self, payment: Payment) -> Payment:
        if payment.id in self.payments:
            raise ValueError("Payment id already exists")
        if any(p.order_id == payment.order_id for p in self.payments.values()):
            raise ValueError("order_id already exists")
        self.payments[payment.id] = deepcopy(payment)
        return payment

    async def save(self, payment: Payment) -> Payment:
        if payment.id not in self.payments:
            raise ValueError("Payment not found")
        if payment.gateway_payment_id and any(
            p.gateway_payment_id == payment.gateway_payment_id and p.id != payment.id
            for p in self.payments.values()
        ):
            raise ValueError("gateway_payment_id already exists")
        self.payments[payment.id] = deepcopy(payment)
        return payment

    async def get(self, payment_id: str) -> Payment | None:
        payment = self.payments.get(payment_id)
        return deepcopy(payment) if payment else None

    async def find_by_gateway_payment_id(self, gateway_payment_id: str) -> Payment | None:
        for payment in self.payments.values():
            if payment.gateway_payment_id == gateway_payment_id:
                return deepcopy(payment)
        return None

    async def find_by_order_id(self, order_id: str) -> Payment | None:
        for payment in self.payments.values():
            if payment.order_id == order_id:
                return deepcopy(payment)
        return None

    async def list_by_booking(self, booking_id: str) -> Sequence[Payment]:
        # dict conserva el orden de inserción = orden de creación
        return [deepcopy(p) for p in self.payments.values() if p.booking_id == booking_id]

    async def find_latest(self, booking_id: str, kind: PaymentKind) -> Payment | None:
        matches = [p for p in await self.list_by_booking(booking_id) if p.kind == kind]
        return matches[-1] if matches else None
