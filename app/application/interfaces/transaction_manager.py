from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """Unidad de trabajo: todo lo que ocurre dentro de ``start()`` se confirma o revierte junto."""

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
