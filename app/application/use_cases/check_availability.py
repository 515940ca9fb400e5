from dataclasses import dataclass, field
from datetime import datetime

from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.application.interfaces.vehicle_repo import VehicleRepo
from app.application.services.availability_checker import AvailabilityChecker
from app.domain.errors import VehicleNotFoundError
from app.domain.services.pricing_engine import PricingEngine
from app.domain.value_objects.datetime_range import DatetimeRange
from app.domain.value_objects.price_breakdown import PriceBreakdown


@dataclass
class AvailabilityQuote:
    vehicle_id: int
    available: bool
    reason: str | None = None
    conflicting_booking_ids: list[int] = field(default_factory=list)
    pricing: PriceBreakdown | None = None


class CheckAvailabilityUseCase:
    """Availability for a proposed interval, priced only when the vehicle is free."""

    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        peak_season_repo: PeakSeasonRepo,
        availability_checker: AvailabilityChecker,
        pricing_engine: PricingEngine,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._peak_season_repo = peak_season_repo
        self._availability = availability_checker
        self._pricing = pricing_engine

    async def execute(
        self,
        vehicle_id: int,
        pickup_date: datetime,
        return_date: datetime,
    ) -> AvailabilityQuote:
        period = DatetimeRange.from_datetimes(pickup_date, return_date)
        vehicle = await self._vehicle_repo.get(vehicle_id)
        if not vehicle:
            raise VehicleNotFoundError(vehicle_id)

        result = await self._availability.check(vehicle, period.start, period.end)
        quote = AvailabilityQuote(
            vehicle_id=vehicle_id,
            available=result.available,
            reason=result.reason,
            conflicting_booking_ids=result.conflicting_booking_ids,
        )
        if result.available:
            rules = await self._peak_season_repo.list_active()
            quote.pricing = self._pricing.price(
                daily_rate=vehicle.daily_rate,
                pickup=period.start,
                return_date=period.end,
                peak_rules=rules,
                weekly_rate=vehicle.weekly_rate,
                monthly_rate=vehicle.monthly_rate,
            )
        return quote
