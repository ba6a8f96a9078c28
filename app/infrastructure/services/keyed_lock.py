"""Registro de candados asyncio por llave."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class AsyncioKeyedLock:
    """
    Un ``asyncio.Lock`` por llave, creado bajo demanda.

    Solo serializa dentro de un proceso. La entrada se libera cuando nadie
    más espera la llave.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                self._locks.pop(key, None)

    def active_keys(self) -> list[str]:
        return list(self._locks)
