from decimal import Decimal

import pytest

from conftest import ADMIN_ID, CUSTOMER_ID, utc

from app.domain.entities.late_fee import LateFeePaymentStatus
from app.domain.errors import (
    InvalidBookingStatusError,
    LateFeeAlreadyExistsError,
    LateFeeNotFoundError,
    PermissionDeniedError,
    ValidationError,
)


@pytest.fixture
async def overdue(harness, clock):
    """Reserva en curso que debía devolverse el 15 de enero a las 10:00; ahora son las 14:00."""
    vehicle = await harness.add_vehicle()
    booking = await harness.ongoing_booking(vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
    clock.set_time(utc(2024, 1, 15, 14))
    return booking


class TestCompute:
    @pytest.mark.asyncio
    async def test_four_hours_at_default_rate(self, harness, overdue):
        late_fee = await harness.late_fees.compute(overdue.id, ADMIN_ID)

        assert late_fee.hours_overdue == 4
        assert late_fee.hourly_rate == Decimal("100")
        assert late_fee.total_late_fee == Decimal("400.00")
        assert late_fee.payment_status == LateFeePaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_custom_hourly_rate(self, harness, overdue):
        late_fee = await harness.late_fees.compute(overdue.id, ADMIN_ID, hourly_rate=Decimal("250"))
        assert late_fee.total_late_fee == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_rate_must_be_positive(self, harness, overdue):
        with pytest.raises(ValidationError):
            await harness.late_fees.compute(overdue.id, ADMIN_ID, hourly_rate=Decimal("0"))

    @pytest.mark.asyncio
    async def test_second_compute_conflicts(self, harness, overdue):
        first = await harness.late_fees.compute(overdue.id, ADMIN_ID)

        with pytest.raises(LateFeeAlreadyExistsError) as exc_info:
            await harness.late_fees.compute(overdue.id, ADMIN_ID)

        assert exc_info.value.details["late_fee_id"] == first.id
        assert len(await harness.late_fees.list_late_fees(booking_id=overdue.id)) == 1

    @pytest.mark.asyncio
    async def test_not_yet_overdue(self, harness, clock):
        vehicle = await harness.add_vehicle()
        booking = await harness.ongoing_booking(vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
        clock.set_time(utc(2024, 1, 15, 9))

        with pytest.raises(ValidationError):
            await harness.late_fees.compute(booking.id, ADMIN_ID)

    @pytest.mark.asyncio
    async def test_terminal_booking(self, harness, clock):
        vehicle = await harness.add_vehicle()
        booking = await harness.ongoing_booking(vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
        await harness.bookings.complete(booking.id, ADMIN_ID)
        clock.set_time(utc(2024, 1, 16))

        with pytest.raises(InvalidBookingStatusError):
            await harness.late_fees.compute(booking.id, ADMIN_ID)

    @pytest.mark.asyncio
    async def test_requires_privileged_actor(self, harness, overdue):
        with pytest.raises(PermissionDeniedError):
            await harness.late_fees.compute(overdue.id, CUSTOMER_ID)


class TestRefreshAndSweep:
    @pytest.mark.asyncio
    async def test_refresh_updates_same_record(self, harness, overdue, clock):
        first = await harness.late_fees.compute(overdue.id, ADMIN_ID)
        clock.advance(hours=2)

        refreshed = await harness.late_fees.refresh(overdue.id)

        assert refreshed.id == first.id
        assert refreshed.hours_overdue == 6
        assert refreshed.total_late_fee == Decimal("600.00")

    @pytest.mark.asyncio
    async def test_refresh_without_record(self, harness, overdue):
        with pytest.raises(LateFeeNotFoundError):
            await harness.late_fees.refresh(overdue.id)

    @pytest.mark.asyncio
    async def test_sweep_creates_then_refreshes(self, harness, clock):
        first_vehicle = await harness.add_vehicle()
        second_vehicle = await harness.add_vehicle(name="Montero")
        third_vehicle = await harness.add_vehicle(name="Innova")
        first = await harness.ongoing_booking(first_vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
        second = await harness.ongoing_booking(second_vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 12))
        # confirmed but never picked up: not swept
        await harness.confirmed_booking(third_vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
        clock.set_time(utc(2024, 1, 15, 14))

        result = await harness.late_fees.sweep(ADMIN_ID)

        assert sorted(result.created) == sorted([first.id, second.id])
        assert result.refreshed == []

        clock.advance(hours=1)
        result = await harness.late_fees.sweep(ADMIN_ID)

        assert result.created == []
        assert sorted(result.refreshed) == sorted([first.id, second.id])
        fees = {fee.booking_id: fee for fee in await harness.late_fees.list_late_fees()}
        assert len(fees) == 2
        assert fees[first.id].hours_overdue == 5
        assert fees[second.id].hours_overdue == 3

    @pytest.mark.asyncio
    async def test_sweep_requires_privileged_actor(self, harness, overdue):
        for actor_id in (CUSTOMER_ID, None):
            with pytest.raises(PermissionDeniedError):
                await harness.late_fees.sweep(actor_id)

        assert await harness.late_fees.list_late_fees() == []

    @pytest.mark.asyncio
    async def test_sweep_leaves_settled_fee_alone(self, harness, overdue, clock):
        late_fee = await harness.late_fees.compute(overdue.id, ADMIN_ID)
        await harness.late_fees.close(late_fee.id, ADMIN_ID, payment_status="waived")
        clock.advance(hours=3)

        await harness.late_fees.sweep(ADMIN_ID)

        stored = await harness.late_fees.get(late_fee.id)
        assert stored.hours_overdue == 4
        assert stored.payment_status == LateFeePaymentStatus.WAIVED


class TestClose:
    @pytest.mark.asyncio
    async def test_close_with_actual_return_date(self, harness, overdue):
        late_fee = await harness.late_fees.compute(overdue.id, ADMIN_ID)

        closed = await harness.late_fees.close(
            late_fee.id,
            ADMIN_ID,
            actual_return_date=utc(2024, 1, 15, 16),
            payment_status=LateFeePaymentStatus.PAID,
            paid_amount=Decimal("600"),
        )

        assert closed.actual_return_date == utc(2024, 1, 15, 16)
        assert closed.hours_overdue == 6
        assert closed.total_late_fee == Decimal("600.00")
        assert closed.payment_status == LateFeePaymentStatus.PAID

    @pytest.mark.asyncio
    async def test_negative_paid_amount(self, harness, overdue):
        late_fee = await harness.late_fees.compute(overdue.id, ADMIN_ID)
        with pytest.raises(ValidationError):
            await harness.late_fees.close(late_fee.id, ADMIN_ID, paid_amount=Decimal("-1"))

    @pytest.mark.asyncio
    async def test_close_requires_privileged_actor(self, harness, overdue):
        late_fee = await harness.late_fees.compute(overdue.id, ADMIN_ID)
        with pytest.raises(PermissionDeniedError):
            await harness.late_fees.close(late_fee.id, CUSTOMER_ID, payment_status="paid")

    @pytest.mark.asyncio
    async def test_unknown_late_fee(self, harness):
        with pytest.raises(LateFeeNotFoundError):
            await harness.late_fees.close(55, ADMIN_ID, payment_status="paid")
