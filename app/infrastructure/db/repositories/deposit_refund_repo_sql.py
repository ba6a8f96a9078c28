from typing import Any, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.deposit_refund_repo import DepositRefundRepo
from app.domain.entities.deposit_refund import DepositRefund, HoldOperation, RefundStatus, RefundType
from app.infrastructure.db.tables import deposit_refunds


def _to_entity(row: Any) -> DepositRefund:
    return DepositRefund(
        id=row["id"],
        booking_id=row["booking_id"],
        original_hold_id=row["original_hold_id"],
        refund_type=RefundType(row["refund_type"]),
        refund_amount=row["refund_amount"],
        deposit_amount=row["deposit_amount"],
        operation=HoldOperation(row["operation"]),
        damage_amount=row["damage_amount"],
        reason=row["reason"] or "",
        status=RefundStatus(row["status"]),
        attempts=row["attempts"],
        failure_message=row["failure_message"],
        created_at=row["created_at"],
        completed_at=row["completed_at"],
    )


def _to_values(refund: DepositRefund) -> dict[str, Any]:
    return {
        "id": refund.id,
        "booking_id": refund.booking_id,
        "original_hold_id": refund.original_hold_id,
        "refund_type": refund.refund_type.value,
        "refund_amount": refund.refund_amount,
        "deposit_amount": refund.deposit_amount,
        "damage_amount": refund.damage_amount,
        "operation": refund.operation.value,
        "reason": refund.reason,
        "status": refund.status.value,
        "attempts": refund.attempts,
        "failure_message": refund.failure_message,
        "created_at": refund.created_at,
        "completed_at": refund.completed_at,
    }


class DepositRefundRepoSQL(DepositRefundRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_booking(self, booking_id: str) -> DepositRefund | None:
        result = await self._session.execute(
            select(deposit_refunds).where(deposit_refunds.c.booking_id == booking_id)
        )
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def create(self, refund: DepositRefund) -> DepositRefund:
        await self._session.execute(insert(deposit_refunds).values(_to_values(refund)))
        return refund

    async def save(self, refund: DepositRefund) -> DepositRefund:
        values = _to_values(refund)
        values.pop("id")
        await self._session.execute(
            update(deposit_refunds).where(deposit_refunds.c.id == refund.id).values(values)
        )
        return refund

    async def list_retryable(self, limit: int = 50) -> Sequence[DepositRefund]:
        stmt = (
            select(deposit_refunds)
            .where(deposit_refunds.c.status.in_([RefundStatus.FAILED.value, RefundStatus.PROCESSING.value]))
            .order_by(deposit_refunds.c.created_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]
