from app.application.dtos.booking_dto import QuoteDTO
from app.application.interfaces.clock import Clock
from app.application.interfaces.trailer_catalog import TrailerCatalog
from app.domain.errors import TrailerNotFoundError
from app.domain.services.pricing import PricingBreakdown, quote
from app.domain.value_objects.datetime_range import DatetimeRange


class QuoteBookingUseCase:
    """Cotiza una renta sin reservar el remolque."""

    def __init__(self, trailer_catalog: TrailerCatalog, clock: Clock) -> None:
        self._trailer_catalog = trailer_catalog
        self._clock = clock

    async def execute(self, request: QuoteDTO) -> PricingBreakdown:
        window = DatetimeRange(start=request.start_time, end=request.end_time)
        window.ensure_bookable_at(self._clock.now())

        trailer = await self._trailer_catalog.get_trailer(request.trailer_id)
        if not trailer:
            raise TrailerNotFoundError(request.trailer_id)

        return quote(
            start=window.start,
            end=window.end,
            rental_type=request.rental_type,
            add_ons=request.add_ons,
            config=trailer.pricing,
        )
