from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, constr

from app.application.dtos.payment_dto import PaymentInitiationDTO
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus


class CreatePaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: constr(strip_whitespace=True, min_length=1)
    payment_type: Literal["rental", "deposit"]


class CreatePaymentResponse(BaseModel):
    payment_id: str
    booking_id: str
    gateway_payment_id: str | None = None
    redirect_url: str | None = None
    amount: Decimal
    status: PaymentStatus
    message: str | None = None

    @classmethod
    def from_dto(cls, dto: PaymentInitiationDTO) -> "CreatePaymentResponse":
        return cls(
            payment_id=dto.payment_id,
            booking_id=dto.booking_id,
            gateway_payment_id=dto.gateway_payment_id,
            redirect_url=dto.redirect_url,
            amount=dto.amount,
            status=dto.status,
            message=None if dto.gateway_confirmed else "Payment gateway unavailable, retry later",
        )


class PaymentStatusResponse(BaseModel):
    payment_id: str
    booking_id: str
    kind: PaymentKind
    status: PaymentStatus
    provider_status: str | None = None
    amount: Decimal
    currency_code: str
    order_id: str
    gateway_payment_id: str | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentStatusResponse":
        return cls(
            payment_id=payment.id,
            booking_id=payment.booking_id,
            kind=payment.kind,
            status=payment.status,
            provider_status=payment.provider_status,
            amount=payment.amount,
            currency_code=payment.currency_code,
            order_id=payment.order_id,
            gateway_payment_id=payment.gateway_payment_id,
            updated_at=payment.updated_at,
        )


class WebhookAck(BaseModel):
    success: bool = True
