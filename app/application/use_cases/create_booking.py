import logging

from app.application.dtos.booking_dto import CreateBookingDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.key_lock import KeyedLock
from app.application.interfaces.trailer_catalog import TrailerCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import IdGenerator
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.errors import SlotUnavailableError, TrailerNotFoundError
from app.domain.services.pricing import AddOn, quote
from app.domain.value_objects.datetime_range import DatetimeRange


class CreateBookingUseCase:
    """
    Guardia de disponibilidad: busca conflictos y crea la reserva como un
    solo paso atómico por remolque.

    La búsqueda y el alta corren bajo el candado del remolque y dentro de
    una misma transacción; dos solicitudes que se superponen nunca pueden
    ver ambas "sin conflicto".
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        trailer_catalog: TrailerCatalog,
        transaction_manager: TransactionManager,
        locks: KeyedLock,
        clock: Clock,
        id_generator: IdGenerator,
    ) -> None:
        self._booking_repo = booking_repo
        self._trailer_catalog = trailer_catalog
        self._transaction_manager = transaction_manager
        self._locks = locks
        self._clock = clock
        self._id_generator = id_generator
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: CreateBookingDTO) -> Booking:
        window = DatetimeRange(start=request.start_time, end=request.end_time)
        window.ensure_bookable_at(self._clock.now())

        trailer = await self._trailer_catalog.get_trailer(request.trailer_id)
        if not trailer:
            raise TrailerNotFoundError(request.trailer_id)

        breakdown = quote(
            start=window.start,
            end=window.end,
            rental_type=request.rental_type,
            add_ons=request.add_ons,
            config=trailer.pricing,
        )

        async with self._locks.hold(f"trailer:{request.trailer_id}"):
            async with self._transaction_manager.start():
                existing = await self._booking_repo.list_blocking_for_trailer(request.trailer_id)
                conflicts = [b.id for b in existing if b.conflicts_with(window)]
                if conflicts:
                    self._logger.info(
                        "Slot unavailable",
                        extra={
                            "trailer_id": request.trailer_id,
                            "window": str(window),
                            "conflicting_booking_ids": conflicts,
                        },
                    )
                    raise SlotUnavailableError(request.trailer_id, conflicts)

                now = self._clock.now()
                booking = Booking(
                    id=self._id_generator.new_id("bk"),
                    user_id=request.user_id,
                    trailer_id=request.trailer_id,
                    start_time=window.start,
                    end_time=window.end,
                    rental_type=request.rental_type,
                    pricing=breakdown.to_snapshot(),
                    add_ons=sorted({AddOn(a).value for a in request.add_ons}),
                    status=BookingStatus.PENDING_PAYMENT,
                    created_at=now,
                    updated_at=now,
                )
                created = await self._booking_repo.create(booking)

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": created.id,
                "trailer_id": created.trailer_id,
                "total": str(created.total_amount),
                "deposit": str(created.deposit_amount),
            },
        )
        return created
