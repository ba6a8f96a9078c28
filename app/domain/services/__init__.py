"""Servicios de dominio puros (sin I/O)."""

from app.domain.services.pricing import AddOn, PricingBreakdown, PricingConfig, quote
from app.domain.services.settlement_policy import (
    DamageCostTable,
    SettlementDecision,
    decide_settlement,
)

__all__ = [
    "AddOn",
    "PricingBreakdown",
    "PricingConfig",
    "quote",
    "DamageCostTable",
    "SettlementDecision",
    "decide_settlement",
]
