from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.domain.entities.deposit_refund import DepositRefund, HoldOperation, RefundStatus, RefundType
from app.domain.entities.payment import Payment, PaymentKind, PaymentStatus, map_provider_status
from app.domain.errors import InvalidTransitionError
from app.domain.value_objects.money import Money
from app.domain.value_objects.order_id import OrderId

NOW = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def _payment(status: PaymentStatus = PaymentStatus.PENDING) -> Payment:
    return Payment(
        id="pay-1",
        booking_id="bk-1",
        order_id="rental_bk-1_AAAAAAAA",
        kind=PaymentKind.RENTAL,
        amount=Decimal("500"),
        status=status,
    )


@pytest.mark.parametrize(
    "provider_status,expected",
    [
        ("CONFIRMED", PaymentStatus.COMPLETED),
        ("confirmed", PaymentStatus.COMPLETED),
        ("CANCELLED", PaymentStatus.CANCELLED),
        ("REJECTED", PaymentStatus.FAILED),
        ("NEW", PaymentStatus.PENDING),
        ("AUTHORIZED", PaymentStatus.PENDING),
        (None, PaymentStatus.PENDING),
    ],
)
def test_provider_status_mapping(provider_status, expected):
    assert map_provider_status(provider_status) == expected


def test_same_status_is_not_a_change():
    payment = _payment(PaymentStatus.COMPLETED)

    assert not payment.apply_status(PaymentStatus.COMPLETED, "CONFIRMED", NOW)


def test_final_payment_never_returns_to_pending():
    payment = _payment(PaymentStatus.FAILED)

    assert not payment.apply_status(PaymentStatus.PENDING, "NEW", NOW)
    assert payment.status == PaymentStatus.FAILED


def test_completed_hold_can_still_be_voided():
    payment = _payment(PaymentStatus.COMPLETED)

    assert payment.apply_status(PaymentStatus.CANCELLED, "CANCELLED", NOW)
    assert payment.status == PaymentStatus.CANCELLED


def test_payment_type_from_request():
    assert PaymentKind.from_request("deposit") == PaymentKind.DEPOSIT_HOLD
    with pytest.raises(ValueError):
        PaymentKind.from_request("tip")


def test_money_minor_units():
    assert Money(Decimal("5000")).to_minor_units() == 500000
    assert Money.from_minor_units(12345).amount == Decimal("123.45")


def test_order_id_fits_gateway_limit():
    order_id = OrderId.generate("DEPOSIT_HOLD", "bk-" + "x" * 60)

    assert len(order_id.value) <= OrderId.MAX_LENGTH
    assert order_id.value.startswith("deposit_hold_bk-")


def test_deposit_refund_retry_cycle():
    refund = DepositRefund(
        id="ref-1",
        booking_id="bk-1",
        original_hold_id="mock_hold_2",
        refund_type=RefundType.FULL,
        refund_amount=Decimal("5000"),
        deposit_amount=Decimal("5000"),
        operation=HoldOperation.RETURN_TO_CUSTOMER,
    )

    refund.start_processing()
    refund.fail("declined")
    assert refund.is_retryable
    refund.start_processing()
    refund.complete(NOW)

    assert refund.status == RefundStatus.COMPLETED
    assert refund.attempts == 2
    assert refund.failure_message is None
    with pytest.raises(InvalidTransitionError):
        refund.start_processing()
