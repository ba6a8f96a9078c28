import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_use_cases
from app.api.schemas.bookings import DepositRefundResponse
from app.config import Settings, get_settings
from app.domain.entities.deposit_refund import RefundStatus
from app.domain.errors import GatewayUnavailableError, SettlementFailedError
from app.infrastructure.db.retry import retry_on_deadlock

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/workers/settlements/{booking_id}/reconcile",
    response_model=DepositRefundResponse,
    status_code=status.HTTP_200_OK,
)
async def reconcile_settlement(
    booking_id: str,
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> DepositRefundResponse:
    """
    Re-drive the deposit settlement of one booking with automatic deadlock retry.

    Safe to call repeatedly: a completed settlement is returned unchanged.
    A refund still PROCESSING after the pass answers 503 (refund pending).
    """

    async def execute_reconcile():
        return await use_cases["settlement"].reconcile(booking_id)

    refund = await retry_on_deadlock(execute_reconcile, max_attempts=3, base_delay=0.1)
    if refund.status == RefundStatus.FAILED:
        raise SettlementFailedError(booking_id, refund.failure_message)
    if refund.status == RefundStatus.PROCESSING:
        raise GatewayUnavailableError("settlement", "refund pending")
    return DepositRefundResponse.from_entity(refund)


@router.post("/workers/settlements/reconcile", status_code=status.HTTP_200_OK)
async def reconcile_pending_settlements(
    use_cases: Annotated[dict, Depends(get_use_cases)],
    settings: Annotated[Settings, Depends(get_settings)],
    limit: int | None = Query(default=None, ge=1, le=500),
) -> dict:
    """Sweep FAILED and PROCESSING settlements left behind by crashes or gateway outages."""
    batch = limit or settings.settlement_reconcile_batch_size
    completed = await use_cases["settlement"].reconcile_pending(limit=batch)
    logger.info("Settlement sweep finished", extra={"completed": completed, "limit": batch})
    return {"completed": completed, "limit": batch}
