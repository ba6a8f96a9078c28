from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.domain.entities.booking import Booking, BookingStatus, PricingSnapshot, RentalType
from app.domain.errors import InvalidTransitionError
from app.domain.value_objects.datetime_range import DatetimeRange

NOW = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
START = datetime(2026, 2, 1, 10, 0, tzinfo=timezone.utc)


def _booking(status: BookingStatus = BookingStatus.PENDING_PAYMENT) -> Booking:
    return Booking(
        id="bk-1",
        user_id="user-1",
        trailer_id="trailer-1",
        start_time=START,
        end_time=START + timedelta(hours=2),
        rental_type=RentalType.HOURLY,
        pricing=PricingSnapshot(
            base_cost=Decimal("500"),
            add_on_cost=Decimal("0"),
            deposit_amount=Decimal("5000"),
            total=Decimal("500"),
        ),
        status=status,
    )


def test_happy_path_bumps_lock_version_on_every_transition():
    booking = _booking()

    booking.mark_paid(NOW)
    booking.activate(NOW)
    booking.mark_returned(NOW)
    booking.close(NOW)

    assert booking.status == BookingStatus.CLOSED
    assert booking.lock_version == 4
    assert booking.updated_at == NOW
    assert booking.is_terminal


@pytest.mark.parametrize("status", [BookingStatus.PENDING_PAYMENT, BookingStatus.PAID])
def test_cancel_allowed_before_activation(status):
    booking = _booking(status)

    booking.cancel(NOW)

    assert booking.status == BookingStatus.CANCELLED
    assert not booking.blocks_availability


@pytest.mark.parametrize(
    "status,method",
    [
        (BookingStatus.PENDING_PAYMENT, "activate"),
        (BookingStatus.PENDING_PAYMENT, "close"),
        (BookingStatus.PAID, "mark_returned"),
        (BookingStatus.ACTIVE, "cancel"),
        (BookingStatus.RETURNED, "cancel"),
        (BookingStatus.CLOSED, "mark_paid"),
        (BookingStatus.CANCELLED, "mark_paid"),
    ],
)
def test_invalid_transitions_raise_and_leave_state_untouched(status, method):
    booking = _booking(status)

    with pytest.raises(InvalidTransitionError) as exc_info:
        getattr(booking, method)(NOW)

    assert exc_info.value.current_status == status.value
    assert booking.status == status
    assert booking.lock_version == 0


def test_conflicts_use_half_open_windows():
    booking = _booking()
    touching = DatetimeRange(start=booking.end_time, end=booking.end_time + timedelta(hours=1))
    overlapping = DatetimeRange(start=booking.end_time - timedelta(minutes=1), end=booking.end_time + timedelta(hours=1))

    assert not booking.conflicts_with(touching)
    assert booking.conflicts_with(overlapping)


def test_terminal_booking_never_conflicts():
    booking = _booking(BookingStatus.CANCELLED)

    assert not booking.conflicts_with(booking.window)
