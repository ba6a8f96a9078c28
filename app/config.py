from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.services.pricing import PricingConfig
from app.domain.services.settlement_policy import DamageCostTable


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    database_url: str | None = None  # e.g. sqlite+aiosqlite:///./trailers.db
    database_echo: bool = False
    use_in_memory: bool = True

    # Payment gateway
    gateway_terminal_key: str | None = Field(default=None, alias="TINKOFF_TERMINAL_KEY")
    gateway_secret: str | None = Field(default=None, alias="TINKOFF_SECRET_KEY")
    gateway_sandbox: bool = Field(default=True, alias="TINKOFF_SANDBOX")
    gateway_force_mock: bool = Field(default=False, alias="TINKOFF_FORCE_MOCK")
    gateway_base_url: str | None = None
    gateway_timeout_seconds: float = 10.0
    gateway_breaker_fail_max: int = 5
    gateway_breaker_reset_timeout: int = 60
    mock_gateway_secret: str = "mock-secret"

    frontend_url: str = "http://localhost:5173"
    backend_url: str = "http://localhost:8080"

    # Pricing defaults for catalog trailers
    currency_code: str = "RUB"
    pricing_min_hours: int = 2
    pricing_min_cost: Decimal = Decimal("500")
    pricing_hour_price: Decimal = Decimal("100")
    pricing_day_price: Decimal = Decimal("900")
    pricing_deposit: Decimal = Decimal("5000")
    pricing_pickup_price: Decimal = Decimal("500")

    # Damage cost per side
    damage_cost_minor: Decimal = Decimal("500")
    damage_cost_moderate: Decimal = Decimal("1500")
    damage_cost_severe: Decimal = Decimal("3000")

    trailer_ids: list[str] = ["trailer-1", "trailer-2", "trailer-3"]
    photo_upload_dir: str = "./uploads"

    settlement_reconcile_batch_size: int = 50

    @property
    def gateway_uses_mock(self) -> bool:
        return self.gateway_force_mock or not (self.gateway_terminal_key and self.gateway_secret)

    def pricing_config(self) -> PricingConfig:
        return PricingConfig(
            min_hours=self.pricing_min_hours,
            min_cost=self.pricing_min_cost,
            hour_price=self.pricing_hour_price,
            day_price=self.pricing_day_price,
            deposit=self.pricing_deposit,
            pickup_price=self.pricing_pickup_price,
            currency_code=self.currency_code,
        )

    def damage_cost_table(self) -> DamageCostTable:
        return DamageCostTable(
            minor=self.damage_cost_minor,
            moderate=self.damage_cost_moderate,
            severe=self.damage_cost_severe,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
