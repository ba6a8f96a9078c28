from copy import deepcopy
from typing import Sequence

from app.application.interfaces.deposit_refund_repo import DepositRefundRepo
from app.domain.entities.deposit_refund import DepositRefund


class InMemoryDepositRefundRepo(DepositRefundRepo):
    def __init__(self) -> None:
        self.refunds: dict[str, DepositRefund] = {}

    async def get_by_booking(self, booking_id: str) -> DepositRefund | None:
        refund = self.refunds.get(booking_id)
        return deepcopy(refund) if refund else None

    async def create(self, refund: DepositRefund) -> DepositRefund:
        if refund.booking_id in self.refunds:
            raise ValueError("Deposit refund already exists for booking")
        self.refunds[refund.booking_id] = deepcopy(refund)
        return refund

    async def save(self, refund: DepositRefund) -> DepositRefund:
        if refund.booking_id not in self.refunds:
            raise ValueError("Deposit refund not found")
        self.refunds[refund.booking_id] = deepcopy(refund)
        return refund

    async def list_retryable(self, limit: int = 50) -> Sequence[DepositRefund]:
        return [deepcopy(r) for r in self.refunds.values() if r.is_retryable][:limit]
