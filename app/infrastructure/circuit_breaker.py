"""
Circuit Breaker configuration for external service calls.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed

Configuration:
- fail_max: Number of consecutive failures before opening circuit
- reset_timeout: Seconds to wait before attempting recovery (HALF_OPEN)
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import TypeVar

from pybreaker import STATE_OPEN, CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_circuit_state_change(breaker_name: str, old_state: str, new_state: str) -> None:
    """
    Log circuit breaker state changes for monitoring and alerting.
    """
    logger.warning(
        "Circuit breaker state changed",
        extra={
            "breaker_name": breaker_name,
            "old_state": old_state,
            "new_state": new_state,
        },
    )


class StateChangeLogger(CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        log_circuit_state_change(self.name, old_state.name if old_state else "none", new_state.name)


def build_breaker(name: str, fail_max: int = 5, reset_timeout: int = 60) -> CircuitBreaker:
    breaker = CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        name=f"{name}_circuit_breaker",
    )
    breaker.add_listener(StateChangeLogger(name))
    return breaker


def _enter_trial_or_raise(breaker: CircuitBreaker) -> None:
    """Raise while ``reset_timeout`` has not elapsed; otherwise move to HALF_OPEN."""
    opened_at = breaker._state_storage.opened_at
    if opened_at and datetime.now(timezone.utc) < opened_at + timedelta(seconds=breaker.reset_timeout):
        raise CircuitBreakerError("Timeout not elapsed yet, circuit breaker still open")
    # The awaited call is the trial; its outcome closes or reopens the circuit
    breaker.half_open()


async def call_with_breaker(breaker: CircuitBreaker, func: Callable[[], Awaitable[T]]) -> T:
    """
    Run an async call under ``breaker``.

    pybreaker's ``call_async`` depends on tornado, so the awaited outcome is
    reported back through the synchronous ``call`` instead. While the circuit
    is open this raises ``CircuitBreakerError`` without calling ``func``.
    """
    if breaker.current_state == STATE_OPEN:
        _enter_trial_or_raise(breaker)

    try:
        result = await func()
    except Exception as exc:

        def _reraise() -> None:
            raise exc

        # Records the failure; raises CircuitBreakerError once the threshold trips
        breaker.call(_reraise)
        raise

    return breaker.call(lambda: result)


__all__ = [
    "build_breaker",
    "call_with_breaker",
    "CircuitBreakerError",
]
