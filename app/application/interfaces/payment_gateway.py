"""Interface PaymentGateway - Puerto hacia la pasarela de pagos (cargo, retención, webhooks)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from app.domain.entities.payment import PaymentKind


class GatewayCallStatus(str, Enum):
    SUCCESS = "SUCCESS"
    REJECTED = "REJECTED"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass
class GatewayResult:
    """
    Resultado tipado de una llamada a la pasarela.

    UNAVAILABLE significa "resultado desconocido" (timeout, red, circuito
    abierto); REJECTED es una negativa explícita del proveedor.
    """

    status: GatewayCallStatus
    gateway_payment_id: str | None = None
    redirect_url: str | None = None
    provider_status: str | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == GatewayCallStatus.SUCCESS

    @classmethod
    def unavailable(cls, message: str) -> "GatewayResult":
        return cls(status=GatewayCallStatus.UNAVAILABLE, error_code="UNAVAILABLE", error_message=message)


class PaymentGateway(ABC):
    """
    Puerto hacia la pasarela. Ninguna operación lanza excepciones por fallas
    de red: todas retornan ``GatewayResult``.
    """

    @abstractmethod
    async def authorize(
        self,
        order_id: str,
        amount: Decimal,
        kind: PaymentKind,
        customer_key: str,
        description: str,
    ) -> GatewayResult:
        """
        Inicia un pago. RENTAL es cargo en una etapa; DEPOSIT_HOLD es
        retención en dos etapas. Idempotente por ``order_id``.
        """
        pass

    @abstractmethod
    async def capture(self, gateway_payment_id: str, amount: Decimal) -> GatewayResult:
        """Captura ``amount`` de una retención; el resto lo libera el proveedor."""
        pass

    @abstractmethod
    async def cancel(self, gateway_payment_id: str) -> GatewayResult:
        """Anula la retención completa."""
        pass

    @abstractmethod
    async def query_status(self, gateway_payment_id: str) -> GatewayResult:
        pass

    @abstractmethod
    def verify_notification(self, payload: dict[str, Any]) -> bool:
        """Valida el ``Token`` de un webhook."""
        pass

    # Operaciones nombradas sobre el depósito

    async def return_to_customer(self, hold_id: str) -> GatewayResult:
        """Devuelve el depósito completo al cliente (anula la retención)."""
        return await self.cancel(hold_id)

    async def retain_for_merchant(self, hold_id: str, amount: Decimal) -> GatewayResult:
        """Retiene ``amount`` para el comercio; el remanente vuelve al cliente."""
        return await self.capture(hold_id, amount)
