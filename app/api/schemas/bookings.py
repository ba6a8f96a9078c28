from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from app.domain.entities.booking import Booking, BookingStatus, RentalType
from app.domain.entities.damage_verdict import DamageLevel, DamageVerdict
from app.domain.entities.deposit_refund import DepositRefund, HoldOperation, RefundStatus, RefundType
from app.domain.entities.photo_check import VehicleSide
from app.domain.services.pricing import AddOn, PricingBreakdown


class _BookingWindow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    trailer_id: constr(strip_whitespace=True, min_length=1)
    start_time: datetime
    end_time: datetime
    rental_type: RentalType
    add_ons: list[AddOn] = Field(default_factory=list)

    @field_validator("start_time", "end_time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class QuoteRequest(_BookingWindow):
    pass


class CreateBookingRequest(_BookingWindow):
    pass


class QuoteLine(BaseModel):
    code: str
    description: str


class QuoteResponse(BaseModel):
    rental_type: RentalType
    duration_hours: int
    duration_days: int
    base_cost: Decimal
    add_on_cost: Decimal
    deposit: Decimal
    total: Decimal
    currency_code: str
    lines: list[QuoteLine]

    @classmethod
    def from_breakdown(cls, breakdown: PricingBreakdown) -> "QuoteResponse":
        return cls(
            rental_type=breakdown.rental_type,
            duration_hours=breakdown.duration_hours,
            duration_days=breakdown.duration_days,
            base_cost=breakdown.base_cost,
            add_on_cost=breakdown.add_on_cost,
            deposit=breakdown.deposit,
            total=breakdown.total,
            currency_code=breakdown.currency_code,
            lines=[QuoteLine(code=code, description=text) for code, text in breakdown.lines],
        )


class BookingResponse(BaseModel):
    booking_id: str
    user_id: str
    trailer_id: str
    start_time: datetime
    end_time: datetime
    rental_type: RentalType
    add_ons: list[str]
    status: BookingStatus
    base_cost: Decimal
    add_on_cost: Decimal
    total_amount: Decimal
    deposit_amount: Decimal
    currency_code: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingResponse":
        return cls(
            booking_id=booking.id,
            user_id=booking.user_id,
            trailer_id=booking.trailer_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            rental_type=booking.rental_type,
            add_ons=list(booking.add_ons),
            status=booking.status,
            base_cost=booking.pricing.base_cost,
            add_on_cost=booking.pricing.add_on_cost,
            total_amount=booking.total_amount,
            deposit_amount=booking.deposit_amount,
            currency_code=booking.pricing.currency_code,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class DamageVerdictResponse(BaseModel):
    side: VehicleSide
    has_damage: bool
    level: DamageLevel
    confidence: float
    assessed: bool
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, verdict: DamageVerdict) -> "DamageVerdictResponse":
        return cls(
            side=verdict.side,
            has_damage=verdict.has_damage,
            level=verdict.level,
            confidence=verdict.confidence,
            assessed=verdict.assessed,
            created_at=verdict.created_at,
        )


class DepositRefundResponse(BaseModel):
    id: str
    booking_id: str
    refund_type: RefundType
    status: RefundStatus
    operation: HoldOperation
    deposit_amount: Decimal
    refund_amount: Decimal
    retained_amount: Decimal
    damage_amount: Decimal | None = None
    reason: str
    attempts: int
    failure_message: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_entity(cls, refund: DepositRefund) -> "DepositRefundResponse":
        return cls(
            id=refund.id,
            booking_id=refund.booking_id,
            refund_type=refund.refund_type,
            status=refund.status,
            operation=refund.operation,
            deposit_amount=refund.deposit_amount,
            refund_amount=refund.refund_amount,
            retained_amount=refund.retained_amount,
            damage_amount=refund.damage_amount,
            reason=refund.reason,
            attempts=refund.attempts,
            failure_message=refund.failure_message,
            created_at=refund.created_at,
            completed_at=refund.completed_at,
        )
