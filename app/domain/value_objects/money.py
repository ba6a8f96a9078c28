"""Value Object Money - representa un valor monetario con su moneda."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class Money:
    """
    Value Object inmutable que representa un monto monetario.

    Attributes:
        amount: Monto decimal (hasta 2 decimales).
        currency_code: Código ISO 4217 de la moneda (ej: RUB, USD).
    """

    amount: Decimal
    currency_code: str = "RUB"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        if len(self.currency_code) != 3:
            raise ValueError(f"currency_code debe ser de 3 caracteres: {self.currency_code}")

        if self.amount < 0:
            raise ValueError(f"amount no puede ser negativo: {self.amount}")

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency_code=self.currency_code)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(amount=self.amount - other.amount, currency_code=self.currency_code)

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Operación no soportada entre Money y {type(other)}")
        if self.currency_code != other.currency_code:
            raise ValueError(
                f"Monedas distintas: {self.currency_code} vs {other.currency_code}"
            )

    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency_code}"

    @classmethod
    def from_minor_units(cls, minor: int, currency_code: str = "RUB") -> "Money":
        """Crea un Money desde unidades menores (kopeks/centavos), como las envía la pasarela."""
        return cls(amount=Decimal(minor) / 100, currency_code=currency_code)

    def to_minor_units(self) -> int:
        """Convierte a unidades menores para la pasarela."""
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
