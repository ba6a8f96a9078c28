from collections.abc import Iterable

from app.application.interfaces.trailer_catalog import TrailerCatalog, TrailerRecord
from app.domain.services.pricing import PricingConfig


class InMemoryTrailerCatalog(TrailerCatalog):
    def __init__(self, trailers: Iterable[TrailerRecord] = ()) -> None:
        self.trailers: dict[str, TrailerRecord] = {t.id: t for t in trailers}

    @classmethod
    def seeded(cls, trailer_ids: Iterable[str], pricing: PricingConfig) -> "InMemoryTrailerCatalog":
        return cls(TrailerRecord(id=trailer_id, name=f"Trailer {trailer_id}", pricing=pricing) for trailer_id in trailer_ids)

    def add(self, trailer: TrailerRecord) -> None:
        self.trailers[trailer.id] = trailer

    async def get_trailer(self, trailer_id: str) -> TrailerRecord | None:
        return self.trailers.get(trailer_id)
