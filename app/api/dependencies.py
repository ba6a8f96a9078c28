from functools import lru_cache
from typing import Any

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AsyncSessionLocal
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.use_cases.cancel_booking import CancelBookingUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.create_payment import CreatePaymentUseCase
from app.application.use_cases.get_booking import GetBookingUseCase, ListBookingsUseCase
from app.application.use_cases.get_payment_status import GetPaymentStatusUseCase
from app.application.use_cases.get_settlement import GetDepositRefundUseCase, ListDamageVerdictsUseCase
from app.application.use_cases.handle_payment_webhook import HandlePaymentWebhookUseCase
from app.application.use_cases.payment_reconciliation import PaymentStatusApplier
from app.application.use_cases.photo_verification import PhotoVerificationGate
from app.application.use_cases.quote_booking import QuoteBookingUseCase
from app.application.use_cases.release_deposit_hold import ReleaseDepositHoldUseCase
from app.application.use_cases.settle_deposit import DepositSettlementEngine
from app.config import Settings, get_settings
from app.domain.events import CheckoutCompleted
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.damage_verdict_repo_sql import DamageVerdictRepoSQL
from app.infrastructure.db.repositories.deposit_refund_repo_sql import DepositRefundRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.photo_check_repo_sql import PhotoCheckRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.damage_assessor_random import RandomDamageAssessor
from app.infrastructure.gateways.factory import build_payment_gateway
from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.damage_verdict_repo import InMemoryDamageVerdictRepo
from app.infrastructure.in_memory.deposit_refund_repo import InMemoryDepositRefundRepo
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.photo_check_repo import InMemoryPhotoCheckRepo
from app.infrastructure.in_memory.trailer_catalog import InMemoryTrailerCatalog
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from app.infrastructure.messaging.event_bus import InProcessEventBus
from app.infrastructure.services.clock_impl import ClockImpl
from app.infrastructure.services.id_generator_impl import IdGeneratorImpl
from app.infrastructure.services.keyed_lock import AsyncioKeyedLock
from app.infrastructure.storage.local_photo_storage import LocalPhotoStorage


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


# Process-wide: the locks serialize across requests, the gateway carries the breaker state
@lru_cache(maxsize=1)
def get_locks() -> AsyncioKeyedLock:
    return AsyncioKeyedLock()


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway:
    return build_payment_gateway(get_settings())


@lru_cache(maxsize=1)
def _shared_services() -> dict[str, Any]:
    settings = get_settings()
    return {
        "trailer_catalog": InMemoryTrailerCatalog.seeded(settings.trailer_ids, settings.pricing_config()),
        "photo_storage": LocalPhotoStorage(settings.photo_upload_dir),
        "damage_assessor": RandomDamageAssessor(),
        "payment_gateway": get_payment_gateway(),
        "locks": get_locks(),
        "clock": ClockImpl(),
        "id_generator": IdGeneratorImpl(),
    }


@lru_cache(maxsize=1)
def _in_memory_bundle() -> dict[str, Any]:
    return {
        **_shared_services(),
        "booking_repo": InMemoryBookingRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "photo_check_repo": InMemoryPhotoCheckRepo(),
        "damage_verdict_repo": InMemoryDamageVerdictRepo(),
        "deposit_refund_repo": InMemoryDepositRefundRepo(),
        "tx_manager": NoopTransactionManager(),
    }


def _sql_bundle(session: AsyncSession) -> dict[str, Any]:
    return {
        **_shared_services(),
        "booking_repo": BookingRepoSQL(session),
        "payment_repo": PaymentRepoSQL(session),
        "photo_check_repo": PhotoCheckRepoSQL(session),
        "damage_verdict_repo": DamageVerdictRepoSQL(session),
        "deposit_refund_repo": DepositRefundRepoSQL(session),
        "tx_manager": SQLAlchemyTransactionManager(session),
    }


def build_use_cases(bundle: dict[str, Any], settings: Settings) -> dict[str, Any]:
    """
    Arma los casos de uso sobre un bundle de adaptadores.

    El bus de eventos es por bundle: el motor de liquidación se suscribe a
    ``CheckoutCompleted`` y corre en la misma petición que subió la última foto.
    """
    event_bus = InProcessEventBus()
    applier = PaymentStatusApplier(
        payment_repo=bundle["payment_repo"],
        booking_repo=bundle["booking_repo"],
        clock=bundle["clock"],
    )
    settlement = DepositSettlementEngine(
        booking_repo=bundle["booking_repo"],
        payment_repo=bundle["payment_repo"],
        photo_check_repo=bundle["photo_check_repo"],
        damage_verdict_repo=bundle["damage_verdict_repo"],
        deposit_refund_repo=bundle["deposit_refund_repo"],
        damage_assessor=bundle["damage_assessor"],
        payment_gateway=bundle["payment_gateway"],
        transaction_manager=bundle["tx_manager"],
        locks=bundle["locks"],
        clock=bundle["clock"],
        id_generator=bundle["id_generator"],
        cost_table=settings.damage_cost_table(),
    )
    event_bus.subscribe(CheckoutCompleted, settlement.on_checkout_completed)
    hold_release = ReleaseDepositHoldUseCase(
        payment_repo=bundle["payment_repo"],
        payment_gateway=bundle["payment_gateway"],
        transaction_manager=bundle["tx_manager"],
        locks=bundle["locks"],
        clock=bundle["clock"],
    )

    return {
        "quote": QuoteBookingUseCase(trailer_catalog=bundle["trailer_catalog"], clock=bundle["clock"]),
        "create_booking": CreateBookingUseCase(
            booking_repo=bundle["booking_repo"],
            trailer_catalog=bundle["trailer_catalog"],
            transaction_manager=bundle["tx_manager"],
            locks=bundle["locks"],
            clock=bundle["clock"],
            id_generator=bundle["id_generator"],
        ),
        "get_booking": GetBookingUseCase(booking_repo=bundle["booking_repo"]),
        "list_bookings": ListBookingsUseCase(booking_repo=bundle["booking_repo"]),
        "cancel_booking": CancelBookingUseCase(
            booking_repo=bundle["booking_repo"],
            payment_repo=bundle["payment_repo"],
            transaction_manager=bundle["tx_manager"],
            locks=bundle["locks"],
            clock=bundle["clock"],
            hold_release=hold_release,
        ),
        "create_payment": CreatePaymentUseCase(
            booking_repo=bundle["booking_repo"],
            payment_repo=bundle["payment_repo"],
            payment_gateway=bundle["payment_gateway"],
            transaction_manager=bundle["tx_manager"],
            locks=bundle["locks"],
            clock=bundle["clock"],
            id_generator=bundle["id_generator"],
        ),
        "handle_webhook": HandlePaymentWebhookUseCase(
            payment_repo=bundle["payment_repo"],
            payment_gateway=bundle["payment_gateway"],
            applier=applier,
            transaction_manager=bundle["tx_manager"],
            locks=bundle["locks"],
            hold_release=hold_release,
        ),
        "get_payment_status": GetPaymentStatusUseCase(
            payment_repo=bundle["payment_repo"],
            booking_repo=bundle["booking_repo"],
            payment_gateway=bundle["payment_gateway"],
            applier=applier,
            transaction_manager=bundle["tx_manager"],
            locks=bundle["locks"],
            hold_release=hold_release,
        ),
        "photo_gate": PhotoVerificationGate(
            booking_repo=bundle["booking_repo"],
            photo_check_repo=bundle["photo_check_repo"],
            photo_storage=bundle["photo_storage"],
            event_publisher=event_bus,
            transaction_manager=bundle["tx_manager"],
            locks=bundle["locks"],
            clock=bundle["clock"],
        ),
        "settlement": settlement,
        "get_deposit_refund": GetDepositRefundUseCase(
            booking_repo=bundle["booking_repo"],
            deposit_refund_repo=bundle["deposit_refund_repo"],
        ),
        "list_damage_verdicts": ListDamageVerdictsUseCase(
            booking_repo=bundle["booking_repo"],
            damage_verdict_repo=bundle["damage_verdict_repo"],
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
) -> dict[str, Any]:
    if settings.use_in_memory:
        return build_use_cases(_in_memory_bundle(), settings)

    if not session:
        raise RuntimeError("DB session not available")

    return build_use_cases(_sql_bundle(session), settings)
