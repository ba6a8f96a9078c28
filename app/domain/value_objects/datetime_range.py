"""Value Object DatetimeRange - ventana de renta semiabierta [start, end)."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.domain.errors import InvalidWindowError

# Máxima anticipación para reservar
MAX_BOOKING_ADVANCE = timedelta(days=30)


@dataclass(frozen=True)
class DatetimeRange:
    """
    Value Object inmutable que representa la ventana de renta de un remolque.

    El intervalo es semiabierto: una reserva que termina a las 12:00 no
    choca con otra que empieza a las 12:00.

    Attributes:
        start: Inicio de la renta (incluido).
        end: Fin de la renta (excluido).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidWindowError(
                f"end debe ser posterior a start: {self.start.isoformat()} >= {self.end.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        """Retorna la duración del rango."""
        return self.end - self.start

    @property
    def billable_hours(self) -> int:
        """
        Horas facturables.

        Regla de negocio: cualquier fracción de hora cuenta como hora completa.
        """
        return math.ceil(self.duration.total_seconds() / 3600)

    @property
    def billable_days(self) -> int:
        """
        Días facturables a partir de las horas facturables.

        Ejemplo: 25 horas = 2 días.
        """
        return math.ceil(self.billable_hours / 24)

    def ensure_bookable_at(self, now: datetime, max_advance: timedelta = MAX_BOOKING_ADVANCE) -> None:
        """
        Valida que la ventana pueda reservarse en ``now``: no empieza en el
        pasado ni más allá de ``max_advance``.

        Raises:
            InvalidWindowError: si el inicio queda fuera de ese rango.
        """
        if self.start < now:
            raise InvalidWindowError(f"start no puede estar en el pasado: {self.start.isoformat()}")
        if self.start > now + max_advance:
            raise InvalidWindowError(
                f"start excede la anticipación máxima de {max_advance.days} días: {self.start.isoformat()}"
            )

    def overlaps_with(self, other: "DatetimeRange") -> bool:
        """Verifica si este rango se superpone con otro (extremos que se tocan no cuentan)."""
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"
