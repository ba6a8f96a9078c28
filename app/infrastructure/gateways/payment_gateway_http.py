import logging
from decimal import Decimal
from typing import Any

import httpx

from app.application.interfaces.payment_gateway import (
    GatewayCallStatus,
    GatewayResult,
    PaymentGateway,
)
from app.domain.entities.payment import PaymentKind
from app.domain.value_objects.money import Money
from app.infrastructure.circuit_breaker import CircuitBreakerError, build_breaker, call_with_breaker
from app.infrastructure.gateways import signature

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://rest-api-test.tinkoff.ru/v2"
PRODUCTION_BASE_URL = "https://securepay.tinkoff.ru/v2"


class PaymentGatewayHTTP(PaymentGateway):
    def __init__(
        self,
        terminal_key: str,
        secret: str,
        base_url: str,
        timeout_seconds: float = 10.0,
        frontend_url: str = "http://localhost:5173",
        backend_url: str = "http://localhost:8080",
        breaker_fail_max: int = 5,
        breaker_reset_timeout: int = 60,
    ) -> None:
        """
        Acquiring-API payment gateway (Init / Confirm / Cancel / GetState).

        Args:
            terminal_key: Merchant terminal key
            secret: Shared secret used to sign requests and verify notifications
            base_url: API base URL (sandbox or production)
            timeout_seconds: Request timeout in seconds; a timeout is reported as UNAVAILABLE
        """
        self._terminal_key = terminal_key
        self._secret = secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._frontend_url = frontend_url.rstrip("/")
        self._backend_url = backend_url.rstrip("/")
        self._breaker = build_breaker("payment_gateway", breaker_fail_max, breaker_reset_timeout)

    @property
    def breaker(self):
        return self._breaker

    async def authorize(
        self,
        order_id: str,
        amount: Decimal,
        kind: PaymentKind,
        customer_key: str,
        description: str,
    ) -> GatewayResult:
        payload: dict[str, Any] = {
            "Amount": Money(amount).to_minor_units(),
            "OrderId": order_id,
            "Description": description,
            "CustomerKey": customer_key,
            # O = one-stage charge, T = two-stage hold
            "PayType": "O" if kind == PaymentKind.RENTAL else "T",
            "SuccessURL": f"{self._frontend_url}/payment/success",
            "FailURL": f"{self._frontend_url}/payment/fail",
            "NotificationURL": f"{self._backend_url}/api/v1/payments/webhook",
            "DATA": {"paymentType": kind.value, "customerKey": customer_key},
        }
        return await self._post("Init", payload, reference=order_id)

    async def capture(self, gateway_payment_id: str, amount: Decimal) -> GatewayResult:
        payload = {"PaymentId": gateway_payment_id, "Amount": Money(amount).to_minor_units()}
        return await self._post("Confirm", payload, reference=gateway_payment_id)

    async def cancel(self, gateway_payment_id: str) -> GatewayResult:
        return await self._post("Cancel", {"PaymentId": gateway_payment_id}, reference=gateway_payment_id)

    async def query_status(self, gateway_payment_id: str) -> GatewayResult:
        return await self._post("GetState", {"PaymentId": gateway_payment_id}, reference=gateway_payment_id)

    def verify_notification(self, payload: dict[str, Any]) -> bool:
        if payload.get("TerminalKey") not in (None, self._terminal_key):
            return False
        return signature.verify(payload, self._secret)

    async def _post(self, operation: str, payload: dict[str, Any], reference: str) -> GatewayResult:
        """
        Sign and send one request, protected by the circuit breaker.

        Network errors, timeouts, 5xx and an open circuit are UNAVAILABLE
        (outcome unknown); ``Success: false`` and 4xx are REJECTED.
        """
        url = f"{self._base_url}/{operation}"
        body = signature.with_token({"TerminalKey": self._terminal_key, **payload}, self._secret)

        async def _make_request():
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=body, headers={"Accept": "application/json"})
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            response = await call_with_breaker(self._breaker, _make_request)
        except CircuitBreakerError as exc:
            logger.error(
                "Payment gateway circuit breaker is open - service unavailable",
                extra={"operation": operation, "reference": reference, "circuit_state": str(exc)},
            )
            return GatewayResult(
                status=GatewayCallStatus.UNAVAILABLE,
                error_code="CIRCUIT_OPEN",
                error_message="Payment gateway temporarily unavailable (circuit breaker open)",
            )
        except httpx.TimeoutException as exc:
            logger.warning(
                "Payment gateway request timeout",
                extra={"operation": operation, "reference": reference, "timeout": self._timeout},
            )
            return GatewayResult(status=GatewayCallStatus.UNAVAILABLE, error_code="TIMEOUT", error_message=str(exc))
        except httpx.HTTPError as exc:
            logger.error(
                "Payment gateway HTTP error",
                exc_info=exc,
                extra={"operation": operation, "reference": reference},
            )
            return GatewayResult(status=GatewayCallStatus.UNAVAILABLE, error_code="HTTP_ERROR", error_message=str(exc))

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            return GatewayResult(
                status=GatewayCallStatus.REJECTED,
                error_code=f"HTTP_{response.status_code}",
                error_message=f"Bad JSON: {response.text[:200]}",
            )

        if response.status_code >= 400 or not data.get("Success"):
            logger.warning(
                "Payment gateway rejected request",
                extra={
                    "operation": operation,
                    "reference": reference,
                    "error_code": data.get("ErrorCode"),
                    "error": data.get("Message"),
                },
            )
            return GatewayResult(
                status=GatewayCallStatus.REJECTED,
                gateway_payment_id=_as_str(data.get("PaymentId")),
                provider_status=data.get("Status"),
                error_code=str(data.get("ErrorCode") or f"HTTP_{response.status_code}"),
                error_message=data.get("Details") or data.get("Message"),
            )

        logger.info(
            "Payment gateway call succeeded",
            extra={"operation": operation, "reference": reference, "provider_status": data.get("Status")},
        )
        return GatewayResult(
            status=GatewayCallStatus.SUCCESS,
            gateway_payment_id=_as_str(data.get("PaymentId")),
            redirect_url=data.get("PaymentURL"),
            provider_status=data.get("Status"),
        )


def _as_str(value: Any) -> str | None:
    return str(value) if value is not None else None
