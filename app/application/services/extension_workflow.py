import logging
from datetime import datetime
from typing import Sequence

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.extension_repo import ExtensionRepo
from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.vehicle_repo import VehicleRepo
from app.application.services.availability_checker import AvailabilityChecker
from app.domain.entities.booking import EXTENDABLE_STATUSES, Booking
from app.domain.entities.extension import Extension, ExtensionDecision, ExtensionStatus
from app.domain.errors import (
    BookingNotFoundError,
    ExtensionNotFoundError,
    InvalidBookingStatusError,
    PendingExtensionExistsError,
    PermissionDeniedError,
    ValidationError,
    VehicleNotFoundError,
)
from app.domain.services.pricing_engine import PricingEngine
from app.domain.value_objects.datetime_range import ensure_utc


class ExtensionWorkflow:
    """
    Requests and reviews extensions of a confirmed or ongoing booking.

    The added interval [current_return, new_return) is checked for availability
    and priced on its own. Approval moves the booking's return date and adds the
    extension fee to its total price.
    """

    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        booking_repo: BookingRepo,
        extension_repo: ExtensionRepo,
        peak_season_repo: PeakSeasonRepo,
        availability_checker: AvailabilityChecker,
        pricing_engine: PricingEngine,
        authorizer: Authorizer,
        clock: Clock,
        transaction_manager: TransactionManager,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._booking_repo = booking_repo
        self._extension_repo = extension_repo
        self._peak_season_repo = peak_season_repo
        self._availability = availability_checker
        self._pricing = pricing_engine
        self._authorizer = authorizer
        self._clock = clock
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def get(self, extension_id: int) -> Extension:
        extension = await self._extension_repo.get(extension_id)
        if not extension:
            raise ExtensionNotFoundError(extension_id)
        return extension

    async def list_extensions(
        self,
        booking_id: int | None = None,
        status: ExtensionStatus | None = None,
    ) -> Sequence[Extension]:
        return await self._extension_repo.find_all(booking_id=booking_id, status=status)

    async def request(
        self,
        booking_id: int,
        requester_id: str,
        new_return_date: datetime,
    ) -> Extension:
        new_return_date = ensure_utc(new_return_date)

        async def work() -> Extension:
            booking = await self._get_booking(booking_id)
            if requester_id != booking.requester_id and not self._authorizer.is_privileged(
                requester_id
            ):
                raise PermissionDeniedError(requester_id, f"extend booking {booking.id}")
            if new_return_date <= booking.return_date:
                raise ValidationError(
                    "new_return_date", "debe ser posterior a la fecha de devolución actual"
                )
            self._ensure_extendable(booking, "request extension")

            pending = await self._extension_repo.find_pending(booking.id)
            if pending:
                raise PendingExtensionExistsError(booking.id, pending.id)

            vehicle = await self._vehicle_repo.get_for_update(booking.vehicle_id)
            if not vehicle:
                raise VehicleNotFoundError(booking.vehicle_id)
            await self._availability.ensure_available(
                vehicle, booking.return_date, new_return_date, exclude_booking_id=booking.id
            )

            rules = await self._peak_season_repo.list_active()
            breakdown = self._pricing.price(
                daily_rate=vehicle.daily_rate,
                pickup=booking.return_date,
                return_date=new_return_date,
                peak_rules=rules,
                weekly_rate=vehicle.weekly_rate,
                monthly_rate=vehicle.monthly_rate,
            )
            extension = Extension.create_pending(
                booking_id=booking.id,
                requester_id=requester_id,
                original_return_date=booking.return_date,
                new_return_date=new_return_date,
                requested_extension_days=breakdown.days,
                extension_fee=breakdown.total,
                created_at=self._clock.now(),
            )
            return await self._extension_repo.create(extension)

        extension = await self._transaction_manager.run(work)
        self._logger.info(
            "Extension requested",
            extra={
                "extension_id": extension.id,
                "booking_id": booking_id,
                "requester_id": requester_id,
                "extension_fee": str(extension.extension_fee),
            },
        )
        return extension

    async def review(
        self,
        extension_id: int,
        decision: ExtensionDecision | str,
        actor_id: str | None,
        notes: str | None = None,
    ) -> Extension:
        decision = ExtensionDecision(decision)
        if not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, f"review extension {extension_id}")

        async def work() -> Extension:
            extension = await self.get(extension_id)
            now = self._clock.now()
            if decision == ExtensionDecision.REJECTED:
                extension.reject(actor_id, now, notes)
                return await self._extension_repo.update(extension)

            extension.approve(actor_id, now, notes)
            booking = await self._get_booking(extension.booking_id)
            self._ensure_extendable(booking, "approve extension")

            vehicle = await self._vehicle_repo.get_for_update(booking.vehicle_id)
            if not vehicle:
                raise VehicleNotFoundError(booking.vehicle_id)
            await self._availability.ensure_available(
                vehicle,
                booking.return_date,
                extension.new_return_date,
                exclude_booking_id=booking.id,
            )
            booking.extend_return_date(extension.new_return_date, extension.extension_fee, now)
            await self._booking_repo.update(booking)
            return await self._extension_repo.update(extension)

        extension = await self._transaction_manager.run(work)
        self._logger.info(
            "Extension reviewed",
            extra={
                "extension_id": extension.id,
                "booking_id": extension.booking_id,
                "decision": decision.value,
                "actor_id": actor_id,
            },
        )
        return extension

    async def approve(self, extension_id: int, actor_id: str, notes: str | None = None) -> Extension:
        return await self.review(extension_id, ExtensionDecision.APPROVED, actor_id, notes)

    async def reject(self, extension_id: int, actor_id: str, notes: str | None = None) -> Extension:
        return await self.review(extension_id, ExtensionDecision.REJECTED, actor_id, notes)

    async def _get_booking(self, booking_id: int) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    def _ensure_extendable(self, booking: Booking, attempted: str) -> None:
        if not booking.can_be_extended:
            raise InvalidBookingStatusError(
                current_status=booking.status.value,
                attempted=attempted,
                allowed_from=sorted(status.value for status in EXTENDABLE_STATUSES),
            )
