from typing import Sequence

from app.domain.entities.deposit_refund import DepositRefund


class DepositRefundRepo:
    async def get_by_booking(self, booking_id: str) -> DepositRefund | None:
        raise NotImplementedError

    async def create(self, refund: DepositRefund) -> DepositRefund:
        """
        Raises:
            ValueError: si la reserva ya tiene una liquidación.
        """
        raise NotImplementedError

    async def save(self, refund: DepositRefund) -> DepositRefund:
        raise NotImplementedError

    async def list_retryable(self, limit: int = 50) -> Sequence[DepositRefund]:
        """Liquidaciones en FAILED o PROCESSING."""
        raise NotImplementedError
