import asyncio
from datetime import timedelta
from decimal import Decimal

import pytest

from app.application.dtos.booking_dto import QuoteDTO
from app.domain.entities.booking import BookingStatus, RentalType
from app.domain.entities.payment import PaymentKind, PaymentStatus
from app.domain.errors import (
    BookingAccessDeniedError,
    InvalidWindowError,
    SlotUnavailableError,
    TrailerNotFoundError,
)
from tests.conftest import BOOKING_START, CLOCK_NOW, TRAILER_ID


@pytest.mark.asyncio
async def test_create_booking_freezes_price(flow, bundle):
    booking = await flow.create_booking(hours=5)

    assert booking.status == BookingStatus.PENDING_PAYMENT
    assert booking.total_amount == Decimal("800")
    assert booking.deposit_amount == Decimal("5000")
    assert booking.id == "bk-1"
    assert booking.created_at == bundle["clock"].now()
    assert await bundle["booking_repo"].get(booking.id) == booking


@pytest.mark.asyncio
async def test_overlapping_booking_is_rejected(flow):
    first = await flow.create_booking()

    with pytest.raises(SlotUnavailableError) as exc_info:
        await flow.create_booking(user_id="user-2", start=BOOKING_START + timedelta(hours=1))

    assert exc_info.value.conflicting_booking_ids == [first.id]


@pytest.mark.asyncio
async def test_back_to_back_bookings_do_not_conflict(flow):
    await flow.create_booking()

    second = await flow.create_booking(user_id="user-2", start=BOOKING_START + timedelta(hours=2))

    assert second.status == BookingStatus.PENDING_PAYMENT


@pytest.mark.asyncio
async def test_other_trailer_is_independent(flow):
    await flow.create_booking()

    assert await flow.create_booking(trailer_id="trailer-2")


@pytest.mark.asyncio
async def test_cancelled_booking_frees_the_slot(flow, use_cases):
    first = await flow.create_booking()
    await use_cases["cancel_booking"].execute(first.id, first.user_id)

    second = await flow.create_booking(user_id="user-2")

    assert second.id != first.id


@pytest.mark.asyncio
async def test_cancel_voids_deposit_hold_completed_before_rental(flow, gateway, use_cases, bundle):
    booking = await flow.create_booking()
    await flow.start_payment(booking, PaymentKind.RENTAL)
    hold = await flow.hold_deposit(booking)

    cancelled = await use_cases["cancel_booking"].execute(booking.id, booking.user_id)

    assert cancelled.status == BookingStatus.CANCELLED
    assert ("cancel", hold.gateway_payment_id) in gateway.calls
    stored_hold = await bundle["payment_repo"].get(hold.payment_id)
    assert stored_hold.status == PaymentStatus.CANCELLED


@pytest.mark.asyncio
async def test_unknown_trailer(flow):
    with pytest.raises(TrailerNotFoundError):
        await flow.create_booking(trailer_id="trailer-404")


@pytest.mark.asyncio
async def test_invalid_window(flow):
    with pytest.raises(InvalidWindowError):
        await flow.create_booking(hours=0)


@pytest.mark.asyncio
async def test_start_in_the_past_is_rejected(flow, bundle):
    with pytest.raises(InvalidWindowError):
        await flow.create_booking(start=CLOCK_NOW - timedelta(hours=1))

    assert await bundle["booking_repo"].list_blocking_for_trailer(TRAILER_ID) == []


@pytest.mark.asyncio
async def test_start_more_than_thirty_days_ahead_is_rejected(flow):
    assert await flow.create_booking(start=CLOCK_NOW + timedelta(days=30))

    with pytest.raises(InvalidWindowError):
        await flow.create_booking(start=CLOCK_NOW + timedelta(days=30, minutes=1))


@pytest.mark.asyncio
async def test_quote_rejects_past_start(use_cases):
    with pytest.raises(InvalidWindowError):
        await use_cases["quote"].execute(
            QuoteDTO(
                trailer_id=TRAILER_ID,
                start_time=CLOCK_NOW - timedelta(days=1),
                end_time=CLOCK_NOW,
                rental_type=RentalType.HOURLY,
                add_ons=[],
            )
        )


@pytest.mark.asyncio
@pytest.mark.concurrency
async def test_concurrent_overlapping_requests_yield_exactly_one_booking(flow, bundle):
    attempts = [
        flow.create_booking(user_id=f"user-{i}", start=BOOKING_START + timedelta(minutes=10 * i))
        for i in range(10)
    ]

    results = await asyncio.gather(*attempts, return_exceptions=True)

    created = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, SlotUnavailableError)]
    assert len(created) == 1
    assert len(rejected) == 9
    blocking = await bundle["booking_repo"].list_blocking_for_trailer(TRAILER_ID)
    assert len(blocking) == 1


@pytest.mark.asyncio
async def test_quote_uses_catalog_pricing(use_cases):
    breakdown = await use_cases["quote"].execute(
        QuoteDTO(
            trailer_id=TRAILER_ID,
            start_time=BOOKING_START,
            end_time=BOOKING_START + timedelta(days=1, hours=1),
            rental_type=RentalType.DAILY,
            add_ons=["pickup"],
        )
    )

    assert breakdown.base_cost == Decimal("1800")
    assert breakdown.total == Decimal("2300")


@pytest.mark.asyncio
async def test_bookings_are_private_to_their_owner(flow, use_cases):
    booking = await flow.create_booking()

    with pytest.raises(BookingAccessDeniedError):
        await use_cases["get_booking"].execute(booking.id, "user-2")
    # Sin user_id: llamada de operador
    assert await use_cases["get_booking"].execute(booking.id, None)


@pytest.mark.asyncio
async def test_list_bookings_newest_first(flow, use_cases):
    early = await flow.create_booking()
    late = await flow.create_booking(start=BOOKING_START + timedelta(days=1))
    await flow.create_booking(user_id="user-2", start=BOOKING_START + timedelta(days=2))

    bookings = await use_cases["list_bookings"].execute("user-1")

    assert [b.id for b in bookings] == [late.id, early.id]
