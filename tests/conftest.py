"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Reloj fijo e identificadores deterministas
- Bundle in-memory con pasarela simulada y assessor de daño configurable
- Cliente HTTP de prueba (FastAPI TestClient) con override de casos de uso
- Motor SQLite in-memory (aiosqlite) para los repositorios SQL
- Un helper que recorre el flujo reserva -> pago -> depósito -> fotos
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.dependencies import build_use_cases, get_use_cases
from app.application.dtos.booking_dto import CreateBookingDTO
from app.application.interfaces.clock import FakeClock
from app.application.interfaces.uuid_generator import SequentialIdGenerator
from app.config import Settings
from app.domain.entities.booking import Booking, RentalType
from app.domain.entities.payment import PaymentKind
from app.domain.entities.photo_check import REQUIRED_SIDES, PhotoPhase
from app.infrastructure.db.tables import metadata
from app.infrastructure.in_memory import (
    FixedDamageAssessor,
    InMemoryBookingRepo,
    InMemoryDamageVerdictRepo,
    InMemoryDepositRefundRepo,
    InMemoryPaymentRepo,
    InMemoryPhotoCheckRepo,
    InMemoryPhotoStorage,
    InMemoryTrailerCatalog,
    InMemoryTransactionManager,
    StubPaymentGateway,
)
from app.infrastructure.services.keyed_lock import AsyncioKeyedLock
from app.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET = "test-secret"
TRAILER_ID = "trailer-1"

# Reloj de pruebas: BOOKING_START queda dentro de la anticipación permitida
CLOCK_NOW = datetime(2026, 1, 20, 9, 0, tzinfo=timezone.utc)

# Ventana de referencia: 2h HOURLY, precio 500, depósito 5000
BOOKING_START = datetime(2026, 2, 1, 10, 0, tzinfo=timezone.utc)


# ============================================================================
# FIXTURES DE INFRAESTRUCTURA IN-MEMORY
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(use_in_memory=True, trailer_ids=[TRAILER_ID, "trailer-2"])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(CLOCK_NOW)


@pytest.fixture
def gateway() -> StubPaymentGateway:
    return StubPaymentGateway(secret=TEST_SECRET)


@pytest.fixture
def assessor() -> FixedDamageAssessor:
    return FixedDamageAssessor()


@pytest.fixture
def photo_storage() -> InMemoryPhotoStorage:
    return InMemoryPhotoStorage()


@pytest.fixture
def bundle(settings, clock, gateway, assessor, photo_storage) -> dict:
    return {
        "booking_repo": InMemoryBookingRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "photo_check_repo": InMemoryPhotoCheckRepo(),
        "damage_verdict_repo": InMemoryDamageVerdictRepo(),
        "deposit_refund_repo": InMemoryDepositRefundRepo(),
        "tx_manager": InMemoryTransactionManager(),
        "trailer_catalog": InMemoryTrailerCatalog.seeded(settings.trailer_ids, settings.pricing_config()),
        "photo_storage": photo_storage,
        "damage_assessor": assessor,
        "payment_gateway": gateway,
        "locks": AsyncioKeyedLock(),
        "clock": clock,
        "id_generator": SequentialIdGenerator(),
    }


@pytest.fixture
def use_cases(bundle, settings) -> dict:
    return build_use_cases(bundle, settings)


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest.fixture
def client(bundle, settings) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient con override de casos de uso.
    Cada petición arma sus casos de uso sobre el mismo bundle in-memory.
    """
    app.dependency_overrides[get_use_cases] = lambda: build_use_cases(bundle, settings)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return {"X-User-Id": "user-1"}


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """SQLite in-memory; una conexión compartida para que las tablas sobrevivan."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(test_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# ============================================================================
# HELPER DE FLUJO
# ============================================================================

class BookingFlow:
    """Atajos para llevar una reserva a un estado dado a través de los casos de uso."""

    def __init__(self, use_cases: dict, gateway: StubPaymentGateway, photo_storage: InMemoryPhotoStorage):
        self.use_cases = use_cases
        self.gateway = gateway
        self.photo_storage = photo_storage

    async def create_booking(
        self,
        user_id: str = "user-1",
        start: datetime = BOOKING_START,
        hours: int = 2,
        trailer_id: str = TRAILER_ID,
    ) -> Booking:
        return await self.use_cases["create_booking"].execute(
            CreateBookingDTO(
                user_id=user_id,
                trailer_id=trailer_id,
                start_time=start,
                end_time=start + timedelta(hours=hours),
                rental_type=RentalType.HOURLY,
            )
        )

    async def start_payment(self, booking: Booking, kind: PaymentKind):
        return await self.use_cases["create_payment"].execute(booking.id, kind, booking.user_id)

    async def confirm(self, gateway_payment_id: str, status: str = "CONFIRMED"):
        self.gateway.set_status(gateway_payment_id, status)
        payload = self.gateway.build_notification(gateway_payment_id, status)
        return await self.use_cases["handle_webhook"].execute(payload)

    async def pay_rental(self, booking: Booking):
        initiated = await self.start_payment(booking, PaymentKind.RENTAL)
        await self.confirm(initiated.gateway_payment_id)
        return initiated

    async def hold_deposit(self, booking: Booking):
        initiated = await self.start_payment(booking, PaymentKind.DEPOSIT_HOLD)
        await self.confirm(initiated.gateway_payment_id)
        return initiated

    async def active_booking(self, **kwargs) -> Booking:
        booking = await self.create_booking(**kwargs)
        await self.pay_rental(booking)
        await self.hold_deposit(booking)
        return await self.use_cases["get_booking"].execute(booking.id, booking.user_id)

    async def upload(self, booking: Booking, phase: PhotoPhase, sides=REQUIRED_SIDES, tag: str = ""):
        gate = self.use_cases["photo_gate"]
        check = None
        for side in sides:
            ref = self.photo_storage.put(f"{booking.id}/{phase.value}/{side.value}{tag}.jpg")
            check = await gate.attach(booking.id, phase, side, ref, user_id=booking.user_id)
        return check

    @staticmethod
    def photo_ref(booking: Booking, phase: PhotoPhase, side, tag: str = "") -> str:
        return f"{booking.id}/{phase.value}/{side.value}{tag}.jpg"


@pytest.fixture
def flow(use_cases, gateway, photo_storage) -> BookingFlow:
    return BookingFlow(use_cases, gateway, photo_storage)


# ============================================================================
# MARKERS DE PYTEST
# ============================================================================

def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "concurrency: Tests que disparan operaciones concurrentes con asyncio.gather"
    )
