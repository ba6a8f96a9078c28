"""Value Objects del dominio de rentas."""

from app.domain.value_objects.datetime_range import DatetimeRange
from app.domain.value_objects.money import Money
from app.domain.value_objects.order_id import OrderId

__all__ = [
    "DatetimeRange",
    "Money",
    "OrderId",
]
