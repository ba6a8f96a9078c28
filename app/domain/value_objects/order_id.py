"""Value Object OrderId - identificador de orden enviado a la pasarela."""

import secrets
import string
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderId:
    """
    Value Object inmutable con el OrderId de un pago.

    Se genera una sola vez al autorizar y nunca se reutiliza; la pasarela
    deduplica por este valor, así que reintentar con el mismo OrderId es seguro.

    Formato: ``<kind>_<booking_id>_<sufijo>`` (ej: rental_bk-1a2b_K3J9QZ2M).
    """

    value: str

    SUFFIX_LENGTH = 8
    ALLOWED_CHARS = string.ascii_uppercase + string.digits
    MAX_LENGTH = 50

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("order_id no puede estar vacío")

        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(f"order_id excede {self.MAX_LENGTH} caracteres: {len(self.value)}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls, kind: str, booking_id: str) -> "OrderId":
        """Genera un OrderId nuevo para el pago ``kind`` de la reserva."""
        suffix = "".join(secrets.choice(cls.ALLOWED_CHARS) for _ in range(cls.SUFFIX_LENGTH))
        prefix = f"{kind.lower()}_{booking_id}"
        room = cls.MAX_LENGTH - cls.SUFFIX_LENGTH - 1
        return cls(value=f"{prefix[:room]}_{suffix}")
