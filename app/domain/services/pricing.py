"""
Motor de precios de renta.

Función pura: la misma entrada produce exactamente la misma salida. Se usa
para congelar el precio de una reserva al crearla.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.entities.booking import PricingSnapshot, RentalType
from app.domain.value_objects.datetime_range import DatetimeRange


class AddOn(str, Enum):
    PICKUP = "pickup"


@dataclass(frozen=True)
class PricingConfig:
    """Tarifas de un remolque. Valores por defecto del catálogo."""

    min_hours: int = 2
    min_cost: Decimal = Decimal("500")
    hour_price: Decimal = Decimal("100")
    day_price: Decimal = Decimal("900")
    deposit: Decimal = Decimal("5000")
    pickup_price: Decimal = Decimal("500")
    currency_code: str = "RUB"


@dataclass(frozen=True)
class PricingBreakdown:
    rental_type: RentalType
    duration_hours: int
    duration_days: int
    base_cost: Decimal
    add_on_cost: Decimal
    deposit: Decimal
    total: Decimal
    currency_code: str
    lines: tuple[tuple[str, str], ...]

    def to_snapshot(self) -> PricingSnapshot:
        return PricingSnapshot(
            base_cost=self.base_cost,
            add_on_cost=self.add_on_cost,
            deposit_amount=self.deposit,
            total=self.total,
            currency_code=self.currency_code,
        )


def quote(
    start: datetime,
    end: datetime,
    rental_type: RentalType,
    add_ons: Iterable[AddOn | str],
    config: PricingConfig,
) -> PricingBreakdown:
    """
    Calcula el desglose de precio de una renta.

    HOURLY: hasta ``min_hours`` se cobra ``min_cost``; cada hora extra
    (redondeando hacia arriba) suma ``hour_price``.
    DAILY: días redondeados hacia arriba por ``day_price``.
    El depósito se detalla pero nunca entra en ``total``.

    Raises:
        InvalidWindowError: si end <= start.
    """
    window = DatetimeRange(start=start, end=end)
    hours = window.billable_hours
    days = window.billable_days
    currency = config.currency_code

    if rental_type == RentalType.HOURLY:
        if hours <= config.min_hours:
            base_cost = config.min_cost
            rental_line = f"{config.min_hours}h minimum = {config.min_cost} {currency}"
        else:
            extra_hours = hours - config.min_hours
            extra_cost = extra_hours * config.hour_price
            base_cost = config.min_cost + extra_cost
            rental_line = (
                f"{config.min_hours}h minimum = {config.min_cost} {currency} + "
                f"{extra_hours}h x {config.hour_price} {currency} = {extra_cost} {currency}"
            )
    else:
        base_cost = days * config.day_price
        rental_line = f"{days}d x {config.day_price} {currency} = {base_cost} {currency}"

    selected = {AddOn(add_on) for add_on in add_ons}
    lines: list[tuple[str, str]] = [("rental", rental_line)]

    add_on_cost = Decimal("0")
    if AddOn.PICKUP in selected:
        add_on_cost += config.pickup_price
        lines.append(("pickup", f"Trailer pickup = {config.pickup_price} {currency}"))

    lines.append(("deposit", f"Deposit hold = {config.deposit} {currency}"))

    return PricingBreakdown(
        rental_type=rental_type,
        duration_hours=hours,
        duration_days=days,
        base_cost=base_cost,
        add_on_cost=add_on_cost,
        deposit=config.deposit,
        total=base_cost + add_on_cost,
        currency_code=currency,
        lines=tuple(lines),
    )
