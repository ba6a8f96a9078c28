from dataclasses import dataclass

from app.domain.services.pricing import PricingConfig


@dataclass(frozen=True)
class TrailerRecord:
    id: str
    name: str
    pricing: PricingConfig


class TrailerCatalog:
    async def get_trailer(self, trailer_id: str) -> TrailerRecord | None:
        raise NotImplementedError
