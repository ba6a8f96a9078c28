from decimal import Decimal

import pytest

from app.domain.entities.damage_verdict import DamageLevel, DamageVerdict
from app.domain.entities.deposit_refund import HoldOperation, RefundType
from app.domain.entities.photo_check import REQUIRED_SIDES, VehicleSide
from app.domain.services.settlement_policy import DamageCostTable, decide_settlement

DEPOSIT = Decimal("5000")
COSTS = DamageCostTable()


def _verdicts(levels: dict[VehicleSide, DamageLevel]) -> list[DamageVerdict]:
    return [
        DamageVerdict(
            booking_id="bk-1",
            side=side,
            has_damage=levels.get(side, DamageLevel.NONE) != DamageLevel.NONE,
            level=levels.get(side, DamageLevel.NONE),
            confidence=0.9,
        )
        for side in REQUIRED_SIDES
    ]


def test_no_damage_is_full_refund_by_releasing_the_hold():
    decision = decide_settlement(_verdicts({}), DEPOSIT, COSTS)

    assert decision.refund_type == RefundType.FULL
    assert decision.refund_amount == Decimal("5000")
    assert decision.damage_amount is None
    assert decision.operation == HoldOperation.RETURN_TO_CUSTOMER


def test_single_severe_side_retains_whole_deposit():
    decision = decide_settlement(_verdicts({VehicleSide.FRONT: DamageLevel.SEVERE}), DEPOSIT, COSTS)

    assert decision.refund_type == RefundType.NONE
    assert decision.refund_amount == Decimal("0")
    assert decision.damage_amount == Decimal("3000")
    assert decision.retained_amount == DEPOSIT
    assert decision.operation == HoldOperation.RETAIN_FOR_MERCHANT
    assert decision.reason.startswith("Severe damage detected")


def test_two_minor_sides_are_partial():
    decision = decide_settlement(
        _verdicts({VehicleSide.LEFT: DamageLevel.MINOR, VehicleSide.RIGHT: DamageLevel.MINOR}),
        DEPOSIT,
        COSTS,
    )

    assert decision.refund_type == RefundType.PARTIAL
    assert decision.refund_amount == Decimal("4000")
    assert decision.damage_amount == Decimal("1000")
    assert decision.retained_amount == Decimal("1000")


def test_damage_reaching_deposit_is_none_without_severe():
    moderate_everywhere = {side: DamageLevel.MODERATE for side in REQUIRED_SIDES}

    decision = decide_settlement(_verdicts(moderate_everywhere), DEPOSIT, COSTS)

    assert decision.refund_type == RefundType.NONE
    assert decision.damage_amount == Decimal("6000")
    assert decision.retained_amount == DEPOSIT
    assert "Severe" not in decision.reason
    assert "6000" in decision.reason and "5000" in decision.reason


def test_not_assessable_sides_count_as_no_damage():
    verdicts = [DamageVerdict.not_assessable("bk-1", side) for side in REQUIRED_SIDES]

    assert decide_settlement(verdicts, DEPOSIT, COSTS).refund_type == RefundType.FULL


def test_cost_table_is_configurable():
    costs = DamageCostTable(minor=Decimal("100"))

    decision = decide_settlement(_verdicts({VehicleSide.REAR: DamageLevel.MINOR}), DEPOSIT, costs)

    assert decision.refund_amount == Decimal("4900")


def test_verdict_rejects_incoherent_level():
    with pytest.raises(ValueError):
        DamageVerdict(booking_id="bk-1", side=VehicleSide.FRONT, has_damage=True, level=DamageLevel.NONE, confidence=0.5)
