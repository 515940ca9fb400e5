import logging
from datetime import datetime
from typing import Callable, Sequence

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.late_fee_repo import LateFeeRepo
from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.vehicle_repo import VehicleRepo
from app.application.services.availability_checker import AvailabilityChecker
from app.domain.entities.booking import Booking, BookingAction, BookingStatus
from app.domain.errors import (
    BookingNotFoundError,
    PermissionDeniedError,
    UnsettledLateFeeError,
    ValidationError,
    VehicleNotFoundError,
)
from app.domain.services.pricing_engine import PricingEngine
from app.domain.value_objects.datetime_range import DatetimeRange


class BookingLifecycle:
    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        booking_repo: BookingRepo,
        late_fee_repo: LateFeeRepo,
        peak_season_repo: PeakSeasonRepo,
        availability_checker: AvailabilityChecker,
        pricing_engine: PricingEngine,
        authorizer: Authorizer,
        clock: Clock,
        transaction_manager: TransactionManager,
        reference_generator: Callable[[], str],
        require_settled_late_fee_to_complete: bool = True,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._booking_repo = booking_repo
        self._late_fee_repo = late_fee_repo
        self._peak_season_repo = peak_season_repo
        self._availability = availability_checker
        self._pricing = pricing_engine
        self._authorizer = authorizer
        self._clock = clock
        self._transaction_manager = transaction_manager
        self._reference_generator = reference_generator
        self._require_settled_late_fee = require_settled_late_fee_to_complete
        self._logger = logging.getLogger(__name__)

    async def get(self, booking_id: int) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    async def list_bookings(
        self,
        vehicle_id: int | None = None,
        requester_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> Sequence[Booking]:
        return await self._booking_repo.find_all(
            vehicle_id=vehicle_id, requester_id=requester_id, status=status
        )

    async def create(
        self,
        vehicle_id: int,
        requester_id: str,
        pickup_date: datetime,
        return_date: datetime,
        pickup_location: str | None = None,
        dropoff_location: str | None = None,
    ) -> Booking:
        if not requester_id:
            raise ValidationError("requester_id", "es requerido")
        period = DatetimeRange.from_datetimes(pickup_date, return_date)

        async def work() -> Booking:
            # Row lock serialises concurrent bookers of the same vehicle
            vehicle = await self._vehicle_repo.get_for_update(vehicle_id)
            if not vehicle:
                raise VehicleNotFoundError(vehicle_id)
            if not vehicle.allows_pickup_at(pickup_location):
                raise ValidationError(
                    "pickup_location", f"'{pickup_location}' no está permitida para este vehículo"
                )
            await self._availability.ensure_available(vehicle, period.start, period.end)

            rules = await self._peak_season_repo.list_active()
            breakdown = self._pricing.price(
                daily_rate=vehicle.daily_rate,
                pickup=period.start,
                return_date=period.end,
                peak_rules=rules,
                weekly_rate=vehicle.weekly_rate,
                monthly_rate=vehicle.monthly_rate,
            )
            booking = Booking.create_pending(
                vehicle_id=vehicle.id,
                requester_id=requester_id,
                period=period,
                total_price=breakdown.total,
                booking_reference=self._reference_generator(),
                created_at=self._clock.now(),
                pickup_location=pickup_location,
                dropoff_location=dropoff_location,
            )
            return await self._booking_repo.create(booking)

        booking = await self._transaction_manager.run(work)
        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "booking_reference": booking.booking_reference,
                "vehicle_id": vehicle_id,
                "requester_id": requester_id,
                "total_price": str(booking.total_price),
            },
        )
        return booking

    async def transition(
        self,
        booking_id: int,
        action: BookingAction | str,
        actor_id: str | None,
        notes: str | None = None,
    ) -> Booking:
        action = BookingAction(action)

        async def work() -> tuple[Booking, BookingStatus]:
            booking = await self.get(booking_id)
            self._authorize(action, booking, actor_id)
            if action == BookingAction.COMPLETE and self._require_settled_late_fee:
                late_fee = await self._late_fee_repo.get_by_booking(booking.id)
                if late_fee and not late_fee.is_settled:
                    raise UnsettledLateFeeError(booking.id, late_fee.id)
            previous = booking.apply(action, self._clock.now(), notes)
            return await self._booking_repo.update(booking), previous

        booking, previous = await self._transaction_manager.run(work)
        self._logger.info(
            "Booking transitioned",
            extra={
                "booking_id": booking.id,
                "action": action.value,
                "from_status": previous.value,
                "to_status": booking.status.value,
                "actor_id": actor_id,
            },
        )
        return booking

    async def approve(self, booking_id: int, actor_id: str, notes: str | None = None) -> Booking:
        return await self.transition(booking_id, BookingAction.APPROVE, actor_id, notes)

    async def reject(self, booking_id: int, actor_id: str, notes: str | None = None) -> Booking:
        return await self.transition(booking_id, BookingAction.REJECT, actor_id, notes)

    async def begin(self, booking_id: int, actor_id: str) -> Booking:
        return await self.transition(booking_id, BookingAction.BEGIN, actor_id)

    async def complete(self, booking_id: int, actor_id: str) -> Booking:
        return await self.transition(booking_id, BookingAction.COMPLETE, actor_id)

    async def cancel(self, booking_id: int, actor_id: str, notes: str | None = None) -> Booking:
        return await self.transition(booking_id, BookingAction.CANCEL, actor_id, notes)

    def _authorize(self, action: BookingAction, booking: Booking, actor_id: str | None) -> None:
        if self._authorizer.is_privileged(actor_id):
            return
        # requesters may cancel their own bookings
        if action == BookingAction.CANCEL and actor_id and actor_id == booking.requester_id:
            return
        raise PermissionDeniedError(actor_id, f"{action.value} booking {booking.id}")
