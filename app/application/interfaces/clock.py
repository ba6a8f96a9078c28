"""Interface Clock - Puerto para abstracción de tiempo."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """
    Puerto para abstracción del tiempo del sistema.

    Todas las marcas de tiempo (created_at, updated_at, completed_at) salen
    de aquí para que los tests sean deterministas.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Retorna la fecha/hora actual (timezone-aware UTC)."""
        raise NotImplementedError


class FakeClock(Clock):
    """Reloj fijo para pruebas; avanza solo cuando el test lo pide."""

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        self._fixed_time = new_time

    def advance(self, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        self._fixed_time = self._fixed_time + timedelta(minutes=minutes, hours=hours, days=days)
