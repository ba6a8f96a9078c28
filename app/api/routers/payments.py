import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.auth import get_current_user_id
from app.api.dependencies import get_use_cases
from app.api.schemas.payments import (
    CreatePaymentRequest,
    CreatePaymentResponse,
    PaymentStatusResponse,
    WebhookAck,
)
from app.domain.entities.payment import PaymentKind

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/payments/create",
    response_model=CreatePaymentResponse,
    status_code=status.HTTP_200_OK,
)
async def create_payment(
    payload: CreatePaymentRequest,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> CreatePaymentResponse:
    try:
        kind = PaymentKind.from_request(payload.payment_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    result = await use_cases["create_payment"].execute(
        booking_id=payload.booking_id,
        kind=kind,
        user_id=user_id,
    )
    if not result.gateway_confirmed:
        # Payment marker stored; the client retries the same request
        response.status_code = status.HTTP_202_ACCEPTED
    return CreatePaymentResponse.from_dto(result)


@router.post("/payments/webhook", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def payment_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
) -> WebhookAck:
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Webhook body is not valid JSON")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body") from e
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Webhook body must be an object")

    await use_cases["handle_webhook"].execute(payload=payload)
    return WebhookAck()


@router.get("/payments/{payment_id}/status", response_model=PaymentStatusResponse)
async def get_payment_status(
    payment_id: str,
    user_id: str = Depends(get_current_user_id),
    use_cases=Depends(get_use_cases),
) -> PaymentStatusResponse:
    payment = await use_cases["get_payment_status"].execute(payment_id=payment_id, user_id=user_id)
    return PaymentStatusResponse.from_entity(payment)
