import pytest
from pybreaker import STATE_CLOSED, STATE_OPEN, CircuitBreakerError

from app.infrastructure.circuit_breaker import build_breaker, call_with_breaker


class FlakyService:
    def __init__(self):
        self.calls = 0
        self.failing = True

    async def __call__(self):
        self.calls += 1
        if self.failing:
            raise ConnectionError("down")
        return "ok"


@pytest.mark.asyncio
async def test_success_passes_through():
    breaker = build_breaker("test", fail_max=2, reset_timeout=60)
    service = FlakyService()
    service.failing = False

    assert await call_with_breaker(breaker, service) == "ok"
    assert breaker.current_state == STATE_CLOSED


@pytest.mark.asyncio
async def test_opens_after_fail_max_and_stops_calling():
    breaker = build_breaker("test", fail_max=2, reset_timeout=60)
    service = FlakyService()

    with pytest.raises(ConnectionError):
        await call_with_breaker(breaker, service)
    with pytest.raises(CircuitBreakerError):
        await call_with_breaker(breaker, service)

    assert breaker.current_state == STATE_OPEN

    with pytest.raises(CircuitBreakerError):
        await call_with_breaker(breaker, service)
    assert service.calls == 2


@pytest.mark.asyncio
async def test_success_resets_failure_count():
    breaker = build_breaker("test", fail_max=2, reset_timeout=60)
    service = FlakyService()

    with pytest.raises(ConnectionError):
        await call_with_breaker(breaker, service)
    service.failing = False
    await call_with_breaker(breaker, service)
    service.failing = True
    with pytest.raises(ConnectionError):
        await call_with_breaker(breaker, service)

    assert breaker.current_state == STATE_CLOSED


async def _open_circuit(breaker, service):
    with pytest.raises(ConnectionError):
        await call_with_breaker(breaker, service)
    with pytest.raises(CircuitBreakerError):
        await call_with_breaker(breaker, service)
    assert breaker.current_state == STATE_OPEN


@pytest.mark.asyncio
async def test_failed_trial_after_reset_timeout_reopens_circuit():
    breaker = build_breaker("test", fail_max=2, reset_timeout=60)
    service = FlakyService()
    await _open_circuit(breaker, service)

    breaker.reset_timeout = 0
    with pytest.raises(CircuitBreakerError):
        await call_with_breaker(breaker, service)

    assert service.calls == 3
    assert breaker.current_state == STATE_OPEN

    breaker.reset_timeout = 60
    with pytest.raises(CircuitBreakerError):
        await call_with_breaker(breaker, service)
    assert service.calls == 3


@pytest.mark.asyncio
async def test_successful_trial_closes_circuit():
    breaker = build_breaker("test", fail_max=2, reset_timeout=60)
    service = FlakyService()
    await _open_circuit(breaker, service)

    breaker.reset_timeout = 0
    service.failing = False

    assert await call_with_breaker(breaker, service) == "ok"
    assert breaker.current_state == STATE_CLOSED
