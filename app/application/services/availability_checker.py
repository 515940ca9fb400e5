import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.vehicle_repo import VehicleRepo
from app.domain.entities.booking import Booking
from app.domain.entities.vehicle import Vehicle
from app.domain.errors import BookingConflictError, VehicleNotFoundError, VehicleUnavailableError

REASON_VEHICLE_UNAVAILABLE = "Vehicle is not available"
REASON_ALREADY_BOOKED = "Vehicle is already booked for the selected dates"


@dataclass
class AvailabilityResult:
    available: bool
    reason: str | None = None
    conflicting_booking_ids: list[int] = field(default_factory=list)


class AvailabilityChecker:
    """
    Decides whether a vehicle is free for [pickup, return_date).

    Two intervals conflict iff pickup < r2 and return_date > p2; rejected and
    cancelled bookings never conflict. Read-only: safe to call repeatedly.
    """

    def __init__(self, vehicle_repo: VehicleRepo, booking_repo: BookingRepo) -> None:
        self._vehicle_repo = vehicle_repo
        self._booking_repo = booking_repo
        self._logger = logging.getLogger(__name__)

    async def find_conflicts(
        self,
        vehicle_id: int,
        pickup: datetime,
        return_date: datetime,
        exclude_booking_id: int | None = None,
    ) -> Sequence[Booking]:
        return await self._booking_repo.find_overlapping(
            vehicle_id=vehicle_id,
            start=pickup,
            end=return_date,
            exclude_booking_id=exclude_booking_id,
        )

    async def check(
        self,
        vehicle: Vehicle,
        pickup: datetime,
        return_date: datetime,
        exclude_booking_id: int | None = None,
    ) -> AvailabilityResult:
        if not vehicle.available:
            return AvailabilityResult(available=False, reason=REASON_VEHICLE_UNAVAILABLE)

        conflicts = await self.find_conflicts(vehicle.id, pickup, return_date, exclude_booking_id)
        if conflicts:
            return AvailabilityResult(
                available=False,
                reason=REASON_ALREADY_BOOKED,
                conflicting_booking_ids=[booking.id for booking in conflicts],
            )
        return AvailabilityResult(available=True)

    async def is_available(
        self,
        vehicle_id: int,
        pickup: datetime,
        return_date: datetime,
        exclude_booking_id: int | None = None,
    ) -> bool:
        vehicle = await self._vehicle_repo.get(vehicle_id)
        if not vehicle:
            raise VehicleNotFoundError(vehicle_id)
        result = await self.check(vehicle, pickup, return_date, exclude_booking_id)
        return result.available

    async def ensure_available(
        self,
        vehicle: Vehicle,
        pickup: datetime,
        return_date: datetime,
        exclude_booking_id: int | None = None,
    ) -> None:
        """Raises the matching Conflict error when the vehicle cannot be held."""
        result = await self.check(vehicle, pickup, return_date, exclude_booking_id)
        if result.available:
            return
        if result.conflicting_booking_ids:
            self._logger.warning(
                "Booking conflict detected",
                extra={
                    "vehicle_id": vehicle.id,
                    "conflicting_booking_ids": result.conflicting_booking_ids,
                },
            )
            raise BookingConflictError(vehicle.id, result.conflicting_booking_ids)
        raise VehicleUnavailableError(vehicle.id)
