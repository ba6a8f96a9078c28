"""Regla de decisión de la liquidación del depósito a partir de los veredictos de daño."""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.damage_verdict import DamageLevel, DamageVerdict
from app.domain.entities.deposit_refund import HoldOperation, RefundType


@dataclass(frozen=True)
class DamageCostTable:
    """Costo de reparación por nivel de daño y por lado."""

    minor: Decimal = Decimal("500")
    moderate: Decimal = Decimal("1500")
    severe: Decimal = Decimal("3000")

    def cost_for(self, level: DamageLevel) -> Decimal:
        return {
            DamageLevel.NONE: Decimal("0"),
            DamageLevel.MINOR: self.minor,
            DamageLevel.MODERATE: self.moderate,
            DamageLevel.SEVERE: self.severe,
        }[level]


@dataclass(frozen=True)
class SettlementDecision:
    refund_type: RefundType
    refund_amount: Decimal
    damage_amount: Decimal | None
    operation: HoldOperation
    retained_amount: Decimal
    reason: str


def decide_settlement(
    verdicts: Sequence[DamageVerdict],
    deposit_amount: Decimal,
    costs: DamageCostTable,
) -> SettlementDecision:
    """
    Decide FULL / NONE / PARTIAL, evaluando en este orden:

    1. sin daño en ningún lado -> FULL, se anula la retención completa;
    2. algún SEVERE o daño total >= depósito -> NONE, se captura todo;
    3. en otro caso -> PARTIAL, se captura el daño y se libera el resto.
    """
    total_damage = sum((costs.cost_for(v.level) for v in verdicts if v.has_damage), Decimal("0"))
    has_damage = any(v.has_damage for v in verdicts)
    has_severe = any(v.level == DamageLevel.SEVERE for v in verdicts)

    if not has_damage:
        return SettlementDecision(
            refund_type=RefundType.FULL,
            refund_amount=deposit_amount,
            damage_amount=None,
            operation=HoldOperation.RETURN_TO_CUSTOMER,
            retained_amount=Decimal("0"),
            reason="No damage detected - full refund",
        )

    if has_severe or total_damage >= deposit_amount:
        if has_severe:
            reason = f"Severe damage detected - deposit retained. Damage cost: {total_damage}"
        else:
            reason = f"Damage cost {total_damage} reaches deposit {deposit_amount} - deposit retained"
        return SettlementDecision(
            refund_type=RefundType.NONE,
            refund_amount=Decimal("0"),
            damage_amount=total_damage,
            operation=HoldOperation.RETAIN_FOR_MERCHANT,
            retained_amount=deposit_amount,
            reason=reason,
        )

    return SettlementDecision(
        refund_type=RefundType.PARTIAL,
        refund_amount=deposit_amount - total_damage,
        damage_amount=total_damage,
        operation=HoldOperation.RETAIN_FOR_MERCHANT,
        retained_amount=total_damage,
        reason=f"Minor damage detected - partial refund. Damage cost: {total_damage}",
    )
