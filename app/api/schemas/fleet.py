import datetime as dt
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from app.api.schemas.common import DECIMAL_ENCODERS, NonNegativeMoney, PositiveMoney
from app.domain.entities.peak_season_rule import PeakPricingType


class CreateVehicleRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1, max_length=150)
    daily_rate: PositiveMoney
    weekly_rate: PositiveMoney | None = None
    monthly_rate: PositiveMoney | None = None
    available: bool = True
    locations: list[str] = Field(default_factory=list)


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, json_encoders=DECIMAL_ENCODERS)

    id: int
    name: str
    daily_rate: Decimal
    weekly_rate: Decimal | None = None
    monthly_rate: Decimal | None = None
    available: bool
    locations: list[str]
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class CreatePeakSeasonRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1, max_length=150)
    start_date: dt.date
    end_date: dt.date
    pricing_type: PeakPricingType
    price_multiplier: Decimal = Field(default=Decimal("1.0"), ge=1, max_digits=6, decimal_places=3)
    fixed_increase: NonNegativeMoney = Decimal("0")
    is_active: bool = True
    notes: str | None = None

    @field_validator("end_date")
    @classmethod
    def validate_dates(cls, value: dt.date, info: Any) -> dt.date:
        start = info.data.get("start_date")
        if start and value < start:
            raise ValueError("end_date must not be before start_date")
        return value


class UpdatePeakSeasonRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1, max_length=150) | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    pricing_type: PeakPricingType | None = None
    price_multiplier: Decimal | None = Field(default=None, ge=1, max_digits=6, decimal_places=3)
    fixed_increase: NonNegativeMoney | None = None
    is_active: bool | None = None
    notes: str | None = None

    @field_validator(
        "name", "start_date", "end_date", "pricing_type", "price_multiplier", "fixed_increase", "is_active"
    )
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PeakSeasonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    start_date: dt.date
    end_date: dt.date
    pricing_type: PeakPricingType
    price_multiplier: Decimal
    fixed_increase: Decimal
    is_active: bool
    notes: str | None = None


class PeakPricingForDateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    is_peak_season: bool
    multiplier: Decimal
    fixed_increase: Decimal
    rule: PeakSeasonResponse | None = None
