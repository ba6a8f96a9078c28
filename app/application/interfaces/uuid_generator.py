"""Interface IdGenerator - Puerto para generación de identificadores."""

from abc import ABC, abstractmethod
from collections import defaultdict


class IdGenerator(ABC):
    """
    Puerto para generación de identificadores de entidades.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def new_id(self, prefix: str) -> str:
        """
        Genera un identificador único.

        Args:
            prefix: Prefijo legible de la entidad (bk, pay, ref).

        Returns:
            String con el identificador, ej: ``bk-3f2a9c1e7d4b``.
        """
        raise NotImplementedError


class SequentialIdGenerator(IdGenerator):
    """Genera ``<prefix>-1``, ``<prefix>-2``... por prefijo."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)

    def new_id(self, prefix: str) -> str:
        self._counters[prefix] += 1
        return f"{prefix}-{self._counters[prefix]}"
