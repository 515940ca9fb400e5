from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str | None = None  # e.g. sqlite+aiosqlite:///./rentals.db
    use_in_memory: bool = True
    sql_echo: bool = False
    db_retry_attempts: int = Field(default=3, ge=1)
    db_retry_base_delay: float = Field(default=0.1, ge=0)

    currency_code: str = "PHP"
    late_fee_hourly_rate: Decimal = Field(default=Decimal("100"), gt=0)
    weekly_discount_factor: Decimal = Field(default=Decimal("0.9"), gt=0, le=1)
    monthly_discount_factor: Decimal = Field(default=Decimal("0.8"), gt=0, le=1)
    require_settled_late_fee_to_complete: bool = True

    # comma separated, e.g. PRIVILEGED_ACTOR_IDS=admin-1,admin-2
    privileged_actor_ids: str = ""

    @property
    def privileged_actors(self) -> list[str]:
        return [item.strip() for item in self.privileged_actor_ids.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
