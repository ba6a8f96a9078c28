"""Interface KeyedLock - exclusión mutua por llave (remolque, pago, reserva)."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol


class KeyedLock(Protocol):
    """
    Candado por llave.

    ``async with locks.hold("trailer:T1"):`` serializa a todos los que usan la
    misma llave; llaves distintas no se bloquean entre sí.
    """

    def hold(self, key: str) -> AbstractAsyncContextManager[None]:
        ...
