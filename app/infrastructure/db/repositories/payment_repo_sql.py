from typing import Any, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus
from app.infrastructure.db.tables import payments


def _to_entity(row: Any) -> Payment:
    return Payment(
        id=row["id"],
        booking_id=row["booking_id"],
        order_id=row["order_id"],
        kind=PaymentKind(row["kind"]),
        amount=row["amount"],
        currency_code=row["currency_code"],
        gateway_payment_id=row["gateway_payment_id"],
        redirect_url=row["redirect_url"],
        provider_status=row["provider_status"],
        status=PaymentStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _to_values(payment: Payment) -> dict[str, Any]:
    return {
        "id": payment.id,
        "booking_id": payment.booking_id,
        "order_id": payment.order_id,
        "kind": payment.kind.value,
        "amount": payment.amount,
        "currency_code": payment.currency_code,
        "gateway_payment_id": payment.gateway_payment_id,
        "redirect_url": payment.redirect_url,
        "provider_status": payment.provider_status,
        "status": payment.status.value,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
    }


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _first(self, *criteria) -> Payment | None:
        result = await self._session.execute(select(payments).where(*criteria).limit(1))
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def create(self, payment: Payment) -> Payment:
        await self._session.execute(insert(payments).values(_to_values(payment)))
        return payment

    async def save(self, payment: Payment) -> Payment:
        values = _to_values(payment)
        values.pop("id")
        await self._session.execute(update(payments).where(payments.c.id == payment.id).values(values))
        return payment

    async def get(self, payment_id: str) -> Payment | None:
        return await self._first(payments.c.id == payment_id)

    async def find_by_gateway_payment_id(self, gateway_payment_id: str) -> Payment | None:
        return await self._first(payments.c.gateway_payment_id == gateway_payment_id)

    async def find_by_order_id(self, order_id: str) -> Payment | None:
        return await self._first(payments.c.order_id == order_id)

    async def list_by_booking(self, booking_id: str) -> Sequence[Payment]:
        stmt = (
            select(payments)
            .where(payments.c.booking_id == booking_id)
            .order_by(payments.c.created_at, payments.c.id)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def find_latest(self, booking_id: str, kind: PaymentKind) -> Payment | None:
        matches = [p for p in await self.list_by_booking(booking_id) if p.kind == kind]
        return matches[-1] if matches else None
