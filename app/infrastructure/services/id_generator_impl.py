"""Implementación real del generador de identificadores."""

import uuid

from app.application.interfaces.uuid_generator import IdGenerator


class IdGeneratorImpl(IdGenerator):
    """
    Genera ``<prefix>-<12 hex>`` a partir de un UUID v4.

    Para testing, usar SequentialIdGenerator de application.interfaces.uuid_generator.
    """

    ID_LENGTH = 12

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[: self.ID_LENGTH]}"
