from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.transaction_manager import TransactionManager


class SQLAlchemyTransactionManager(TransactionManager):
    """
    Confirma al salir del bloque más externo y revierte si hubo excepción.

    La sesión puede haber iniciado una transacción implícita con una lectura
    previa; esa transacción se confirma junto con las escrituras del bloque.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._depth = 0

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._depth:
            yield
            return

        self._depth += 1
        try:
            yield
        except BaseException:
            await self._session.rollback()
            raise
        else:
            await self._session.commit()
        finally:
            self._depth -= 1
