import logging
from collections import deque
from decimal import Decimal
from typing import Any

from app.application.interfaces.payment_gateway import (
    GatewayCallStatus,
    GatewayResult,
    PaymentGateway,
)
from app.domain.entities.payment import PaymentKind
from app.domain.value_objects.money import Money
from app.infrastructure.gateways import signature

logger = logging.getLogger(__name__)


class StubPaymentGateway(PaymentGateway):
    """
    Pasarela simulada (modo mock): respuestas deterministas y exitosas,
    firmadas y verificadas con el mismo algoritmo que la pasarela real.

    ``fail_next`` permite a los tests inyectar un REJECTED o UNAVAILABLE en
    la próxima llamada de una operación.
    """

    def __init__(self, secret: str, terminal_key: str = "mock-terminal", frontend_url: str = "http://localhost:5173"):
        self._secret = secret
        self._terminal_key = terminal_key
        self._frontend_url = frontend_url.rstrip("/")
        self._sequence = 0
        self._by_order: dict[str, str] = {}
        self.payments: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[str, deque[GatewayResult]] = {}

    def fail_next(self, operation: str, status: GatewayCallStatus, error_code: str = "MOCK_ERROR") -> None:
        result = GatewayResult(status=status, error_code=error_code, error_message=f"Injected {status.value} on {operation}")
        self._failures.setdefault(operation, deque()).append(result)

    def _injected(self, operation: str) -> GatewayResult | None:
        queue = self._failures.get(operation)
        return queue.popleft() if queue else None

    async def authorize(
        self,
        order_id: str,
        amount: Decimal,
        kind: PaymentKind,
        customer_key: str,
        description: str,
    ) -> GatewayResult:
        self.calls.append(("authorize", order_id))
        injected = self._injected("authorize")
        if injected:
            return injected

        # Idempotente por order_id
        gateway_payment_id = self._by_order.get(order_id)
        if not gateway_payment_id:
            self._sequence += 1
            prefix = "mock_payment" if kind == PaymentKind.RENTAL else "mock_hold"
            gateway_payment_id = f"{prefix}_{self._sequence}"
            self._by_order[order_id] = gateway_payment_id
            self.payments[gateway_payment_id] = {
                "OrderId": order_id,
                "Amount": Money(amount).to_minor_units(),
                "Status": "NEW",
                "PayType": "O" if kind == PaymentKind.RENTAL else "T",
            }
            logger.info("Creating mock payment", extra={"order_id": order_id, "gateway_payment_id": gateway_payment_id})

        return GatewayResult(
            status=GatewayCallStatus.SUCCESS,
            gateway_payment_id=gateway_payment_id,
            redirect_url=f"{self._frontend_url}/payment/mock?paymentId={gateway_payment_id}",
            provider_status=self.payments[gateway_payment_id]["Status"],
        )

    async def capture(self, gateway_payment_id: str, amount: Decimal) -> GatewayResult:
        self.calls.append(("capture", gateway_payment_id))
        return self._move(gateway_payment_id, "capture", "CONFIRMED", captured=Money(amount).to_minor_units())

    async def cancel(self, gateway_payment_id: str) -> GatewayResult:
        self.calls.append(("cancel", gateway_payment_id))
        return self._move(gateway_payment_id, "cancel", "CANCELLED")

    async def query_status(self, gateway_payment_id: str) -> GatewayResult:
        self.calls.append(("query_status", gateway_payment_id))
        injected = self._injected("query_status")
        if injected:
            return injected
        payment = self.payments.get(gateway_payment_id)
        if not payment:
            return GatewayResult(status=GatewayCallStatus.REJECTED, error_code="NOT_FOUND", error_message="Unknown payment")
        return GatewayResult(
            status=GatewayCallStatus.SUCCESS,
            gateway_payment_id=gateway_payment_id,
            provider_status=payment["Status"],
        )

    def verify_notification(self, payload: dict[str, Any]) -> bool:
        return signature.verify(payload, self._secret)

    def set_status(self, gateway_payment_id: str, provider_status: str) -> None:
        """Simula que el cliente pagó o canceló en la página de la pasarela."""
        self.payments[gateway_payment_id]["Status"] = provider_status

    def build_notification(self, gateway_payment_id: str, provider_status: str) -> dict[str, Any]:
        """Arma un webhook firmado como lo enviaría el proveedor."""
        payment = self.payments.get(gateway_payment_id, {})
        body = {
            "TerminalKey": self._terminal_key,
            "OrderId": payment.get("OrderId"),
            "Success": provider_status != "REJECTED",
            "Status": provider_status,
            "PaymentId": gateway_payment_id,
            "ErrorCode": "0",
            "Amount": payment.get("Amount"),
        }
        return signature.with_token(body, self._secret)

    def _move(self, gateway_payment_id: str, operation: str, target: str, captured: int | None = None) -> GatewayResult:
        injected = self._injected(operation)
        if injected:
            return injected
        payment = self.payments.get(gateway_payment_id)
        if not payment:
            return GatewayResult(status=GatewayCallStatus.REJECTED, error_code="NOT_FOUND", error_message="Unknown payment")
        payment["Status"] = target
        if captured is not None:
            payment["CapturedAmount"] = captured
        logger.info("Mock hold operation", extra={"gateway_payment_id": gateway_payment_id, "operation": operation})
        return GatewayResult(status=GatewayCallStatus.SUCCESS, gateway_payment_id=gateway_payment_id, provider_status=target)
