import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import Sequence

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.late_fee_repo import LateFeeRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.booking import ACTIVE_STATUSES, Booking
from app.domain.entities.late_fee import LateFee, LateFeePaymentStatus
from app.domain.errors import (
    BookingNotFoundError,
    DomainError,
    InvalidBookingStatusError,
    LateFeeAlreadyExistsError,
    LateFeeNotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.domain.value_objects.datetime_range import ensure_utc


@dataclass
class SweepResult:
    created: list[int] = field(default_factory=list)
    refreshed: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)


class LateFeeCalculator:
    def __init__(
        self,
        booking_repo: BookingRepo,
        late_fee_repo: LateFeeRepo,
        authorizer: Authorizer,
        clock: Clock,
        transaction_manager: TransactionManager,
        default_hourly_rate: Decimal = Decimal("100"),
    ) -> None:
        self._booking_repo = booking_repo
        self._late_fee_repo = late_fee_repo
        self._authorizer = authorizer
        self._clock = clock
        self._transaction_manager = transaction_manager
        self._default_hourly_rate = Decimal(default_hourly_rate)
        self._logger = logging.getLogger(__name__)

    async def get(self, late_fee_id: int) -> LateFee:
        late_fee = await self._late_fee_repo.get(late_fee_id)
        if not late_fee:
            raise LateFeeNotFoundError(late_fee_id=late_fee_id)
        return late_fee

    async def list_late_fees(self, booking_id: int | None = None) -> Sequence[LateFee]:
        return await self._late_fee_repo.find_all(booking_id=booking_id)

    async def compute(
        self,
        booking_id: int,
        actor_id: str | None,
        hourly_rate: Decimal | None = None,
    ) -> LateFee:
        """
        Creates the late fee of an overdue booking.

        A second call for the same booking raises LateFeeAlreadyExistsError;
        use `refresh` to bring an existing record up to date.
        """
        self._require_privileged(actor_id, f"compute late fee for booking {booking_id}")
        rate = self._resolve_rate(hourly_rate)
        late_fee = await self._transaction_manager.run(partial(self._create, booking_id, rate))
        self._logger.info(
            "Late fee computed",
            extra={
                "booking_id": booking_id,
                "late_fee_id": late_fee.id,
                "hours_overdue": late_fee.hours_overdue,
                "total_late_fee": str(late_fee.total_late_fee),
            },
        )
        return late_fee

    async def refresh(self, booking_id: int) -> LateFee:
        """Recomputes an open, unpaid late fee while its booking is still overdue."""

        async def work() -> LateFee:
            late_fee = await self._late_fee_repo.get_by_booking(booking_id)
            if not late_fee:
                raise LateFeeNotFoundError(booking_id=booking_id)
            booking = await self._get_booking(booking_id)
            return await self._refresh(booking, late_fee)

        return await self._transaction_manager.run(work)

    async def sweep(self, actor_id: str | None) -> SweepResult:
        """Creates or refreshes the late fee of every ongoing booking past its return date."""
        self._require_privileged(actor_id, "sweep late fees")
        now = self._clock.now()
        overdue = await self._booking_repo.list_overdue(now)
        result = SweepResult()
        for booking in overdue:
            try:
                created = await self._transaction_manager.run(partial(self._sweep_one, booking.id))
            except DomainError as exc:
                # e.g. a concurrent sweep created the record first
                self._logger.warning(
                    "Late fee sweep skipped booking",
                    extra={"booking_id": booking.id, "error_code": exc.code},
                )
                result.skipped.append(booking.id)
                continue
            (result.created if created else result.refreshed).append(booking.id)

        self._logger.info(
            "Late fee sweep finished",
            extra={
                "overdue_count": len(overdue),
                "created_count": len(result.created),
                "refreshed_count": len(result.refreshed),
                "skipped_count": len(result.skipped),
                "actor_id": actor_id,
            },
        )
        return result

    async def close(
        self,
        late_fee_id: int,
        actor_id: str | None,
        actual_return_date: datetime | None = None,
        payment_status: LateFeePaymentStatus | str | None = None,
        paid_amount: Decimal | None = None,
    ) -> LateFee:
        """Records the actual return date and payment facts of a late fee."""
        self._require_privileged(actor_id, f"update late fee {late_fee_id}")
        if paid_amount is not None and paid_amount < 0:
            raise ValidationError("paid_amount", "no puede ser negativo")

        async def work() -> LateFee:
            late_fee = await self.get(late_fee_id)
            now = self._clock.now()
            if actual_return_date is not None:
                late_fee.close(ensure_utc(actual_return_date), now)
            if paid_amount is not None:
                late_fee.set_paid_amount(Decimal(paid_amount), now)
            if payment_status is not None:
                late_fee.payment_status = LateFeePaymentStatus(payment_status)
            late_fee.updated_at = now
            return await self._late_fee_repo.update(late_fee)

        late_fee = await self._transaction_manager.run(work)
        self._logger.info(
            "Late fee updated",
            extra={
                "late_fee_id": late_fee.id,
                "booking_id": late_fee.booking_id,
                "payment_status": late_fee.payment_status.value,
                "actor_id": actor_id,
            },
        )
        return late_fee

    async def _create(self, booking_id: int, hourly_rate: Decimal) -> LateFee:
        booking = await self._get_booking(booking_id)
        now = self._clock.now()
        if not booking.is_active:
            raise InvalidBookingStatusError(
                current_status=booking.status.value,
                attempted="compute late fee",
                allowed_from=sorted(status.value for status in ACTIVE_STATUSES),
            )
        if booking.return_date >= now:
            raise ValidationError("return_date", "la reserva aún no está vencida")

        existing = await self._late_fee_repo.get_by_booking(booking.id)
        if existing:
            raise LateFeeAlreadyExistsError(booking.id, existing.id)

        late_fee = LateFee.compute(
            booking_id=booking.id,
            original_return_date=booking.return_date,
            now=now,
            hourly_rate=hourly_rate,
        )
        return await self._late_fee_repo.create(late_fee)

    async def _sweep_one(self, booking_id: int) -> bool:
        """Returns True when a new record was created."""
        booking = await self._get_booking(booking_id)
        existing = await self._late_fee_repo.get_by_booking(booking_id)
        if existing:
            await self._refresh(booking, existing)
            return False
        await self._create(booking_id, self._default_hourly_rate)
        return True

    async def _refresh(self, booking: Booking, late_fee: LateFee) -> LateFee:
        now = self._clock.now()
        if late_fee.is_closed or late_fee.is_settled or not booking.is_overdue(now):
            return late_fee
        late_fee.recompute(now, now)
        return await self._late_fee_repo.update(late_fee)

    async def _get_booking(self, booking_id: int) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    def _resolve_rate(self, hourly_rate: Decimal | None) -> Decimal:
        if hourly_rate is None:
            return self._default_hourly_rate
        rate = Decimal(hourly_rate)
        if rate <= 0:
            raise ValidationError("hourly_rate", "debe ser mayor que cero")
        return rate

    def _require_privileged(self, actor_id: str | None, operation: str) -> None:
        if not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, operation)
