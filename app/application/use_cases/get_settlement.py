from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.damage_verdict_repo import DamageVerdictRepo
from app.application.interfaces.deposit_refund_repo import DepositRefundRepo
from app.application.use_cases.get_booking import load_owned_booking
from app.domain.entities.damage_verdict import DamageVerdict
from app.domain.entities.deposit_refund import DepositRefund
from app.domain.errors import DepositRefundNotFoundError


class GetDepositRefundUseCase:
    def __init__(self, booking_repo: BookingRepo, deposit_refund_repo: DepositRefundRepo) -> None:
        self._booking_repo = booking_repo
        self._deposit_refund_repo = deposit_refund_repo

    async def execute(self, booking_id: str, user_id: str | None) -> DepositRefund:
        await load_owned_booking(self._booking_repo, booking_id, user_id)
        refund = await self._deposit_refund_repo.get_by_booking(booking_id)
        if not refund:
            raise DepositRefundNotFoundError(booking_id)
        return refund


class ListDamageVerdictsUseCase:
    def __init__(self, booking_repo: BookingRepo, damage_verdict_repo: DamageVerdictRepo) -> None:
        self._booking_repo = booking_repo
        self._damage_verdict_repo = damage_verdict_repo

    async def execute(self, booking_id: str, user_id: str | None) -> Sequence[DamageVerdict]:
        await load_owned_booking(self._booking_repo, booking_id, user_id)
        return await self._damage_verdict_repo.list_by_booking(booking_id)
