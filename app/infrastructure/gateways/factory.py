import logging

from app.application.interfaces.payment_gateway import PaymentGateway
from app.config import Settings
from app.infrastructure.gateways.payment_gateway_http import (
    PRODUCTION_BASE_URL,
    SANDBOX_BASE_URL,
    PaymentGatewayHTTP,
)
from app.infrastructure.in_memory.payment_gateway import StubPaymentGateway

logger = logging.getLogger(__name__)


def build_payment_gateway(settings: Settings) -> PaymentGateway:
    """Pasarela real si hay credenciales; modo mock si faltan o si se fuerza."""
    if settings.gateway_uses_mock:
        logger.warning("Payment gateway credentials not configured, using mock mode")
        return StubPaymentGateway(
            secret=settings.gateway_secret or settings.mock_gateway_secret,
            frontend_url=settings.frontend_url,
        )

    base_url = settings.gateway_base_url or (SANDBOX_BASE_URL if settings.gateway_sandbox else PRODUCTION_BASE_URL)
    return PaymentGatewayHTTP(
        terminal_key=settings.gateway_terminal_key,
        secret=settings.gateway_secret,
        base_url=base_url,
        timeout_seconds=settings.gateway_timeout_seconds,
        frontend_url=settings.frontend_url,
        backend_url=settings.backend_url,
        breaker_fail_max=settings.gateway_breaker_fail_max,
        breaker_reset_timeout=settings.gateway_breaker_reset_timeout,
    )
