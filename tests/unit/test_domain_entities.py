import re
from decimal import Decimal

import pytest

from conftest import utc

from app.domain.entities.booking import Booking, BookingAction, BookingStatus
from app.domain.entities.extension import Extension, ExtensionStatus
from app.domain.entities.late_fee import LateFee, LateFeePaymentStatus, count_overdue_hours
from app.domain.entities.payment import (
    Payment,
    PaymentStatus,
    PaymentType,
    calculate_deposit_refund,
)
from app.domain.entities.vehicle import Vehicle
from app.domain.errors import (
    InvalidBookingStatusError,
    InvalidDateRangeError,
    InvalidExtensionStatusError,
    InvalidPaymentStatusError,
    ValidationError,
)
from app.domain.value_objects.booking_reference import BookingReference
from app.domain.value_objects.datetime_range import DatetimeRange, count_rental_days, ensure_utc


def _booking(status: BookingStatus = BookingStatus.PENDING) -> Booking:
    return Booking(
        id=1,
        booking_reference="BR-TEST-0001",
        vehicle_id=1,
        requester_id="customer-1",
        pickup_date=utc(2024, 1, 10, 10),
        return_date=utc(2024, 1, 15, 10),
        status=status,
        total_price=Decimal("5000.00"),
    )


class TestDatetimeRange:
    def test_return_must_follow_pickup(self):
        with pytest.raises(InvalidDateRangeError):
            DatetimeRange(start=utc(2024, 1, 2), end=utc(2024, 1, 2))

    def test_half_open_intervals_touching_do_not_overlap(self):
        first = DatetimeRange(start=utc(2024, 1, 10), end=utc(2024, 1, 15))
        second = DatetimeRange(start=utc(2024, 1, 15), end=utc(2024, 1, 20))
        assert not first.overlaps_with(second)

    def test_overlapping_intervals(self):
        first = DatetimeRange(start=utc(2024, 1, 10), end=utc(2024, 1, 15))
        second = DatetimeRange(start=utc(2024, 1, 14), end=utc(2024, 1, 20))
        assert first.overlaps_with(second)
        assert second.overlaps_with(first)

    def test_naive_datetimes_read_as_utc(self):
        from datetime import datetime

        period = DatetimeRange.from_datetimes(datetime(2024, 1, 1, 10), datetime(2024, 1, 2, 10))
        assert period.start == utc(2024, 1, 1, 10)
        assert ensure_utc(datetime(2024, 1, 1)) == utc(2024, 1, 1)

    def test_calendar_days_follow_rental_days(self):
        period = DatetimeRange(start=utc(2024, 1, 1, 22), end=utc(2024, 1, 3, 23))
        assert period.rental_days == 3
        assert [day.day for day in period.calendar_days()] == [1, 2, 3]

    def test_count_rental_days(self):
        assert count_rental_days(utc(2024, 1, 1), utc(2024, 1, 1, 1)) == 1
        assert count_rental_days(utc(2024, 1, 1), utc(2024, 1, 2, 1)) == 2
        assert count_rental_days(utc(2024, 1, 2), utc(2024, 1, 1)) == 1


class TestBookingStateMachine:
    def test_happy_path(self):
        booking = _booking()
        at = utc(2024, 1, 1)
        booking.approve(at)
        booking.begin(at)
        booking.complete(at)
        assert booking.status == BookingStatus.COMPLETED
        assert booking.is_terminal

    def test_reject_then_approve_fails(self):
        booking = _booking()
        booking.reject(utc(2024, 1, 1), notes="Documentos incompletos")

        with pytest.raises(InvalidBookingStatusError) as exc_info:
            booking.approve(utc(2024, 1, 1))

        assert booking.status == BookingStatus.REJECTED
        assert booking.admin_notes == "Documentos incompletos"
        assert exc_info.value.details["current_status"] == "rejected"

    def test_cancel_only_from_confirmed_or_ongoing(self):
        with pytest.raises(InvalidBookingStatusError):
            _booking(BookingStatus.PENDING).cancel(utc(2024, 1, 1))
        for status in (BookingStatus.CONFIRMED, BookingStatus.ONGOING):
            booking = _booking(status)
            booking.cancel(utc(2024, 1, 1))
            assert booking.status == BookingStatus.CANCELLED

    def test_complete_requires_ongoing(self):
        with pytest.raises(InvalidBookingStatusError):
            _booking(BookingStatus.CONFIRMED).complete(utc(2024, 1, 1))

    def test_apply_returns_previous_status(self):
        booking = _booking(BookingStatus.CONFIRMED)
        previous = booking.apply(BookingAction.BEGIN, utc(2024, 1, 10))
        assert previous == BookingStatus.CONFIRMED
        assert booking.updated_at == utc(2024, 1, 10)

    def test_extend_adds_fee_to_total(self):
        booking = _booking(BookingStatus.ONGOING)
        booking.extend_return_date(utc(2024, 1, 17, 10), Decimal("2000.00"), utc(2024, 1, 12))
        assert booking.return_date == utc(2024, 1, 17, 10)
        assert booking.total_price == Decimal("7000.00")

    def test_extend_pending_booking_fails(self):
        with pytest.raises(InvalidBookingStatusError):
            _booking().extend_return_date(utc(2024, 1, 17), Decimal("1"), utc(2024, 1, 1))

    def test_overdue_only_while_active(self):
        booking = _booking(BookingStatus.ONGOING)
        assert booking.is_overdue(utc(2024, 1, 15, 11))
        assert not booking.is_overdue(utc(2024, 1, 15, 9))
        booking.status = BookingStatus.COMPLETED
        assert not booking.is_overdue(utc(2024, 1, 20))


class TestExtension:
    def _extension(self) -> Extension:
        return Extension.create_pending(
            booking_id=1,
            requester_id="customer-1",
            original_return_date=utc(2024, 1, 15),
            new_return_date=utc(2024, 1, 17),
            requested_extension_days=2,
            extension_fee=Decimal("2000.00"),
            created_at=utc(2024, 1, 12),
        )

    def test_review_records_reviewer(self):
        extension = self._extension()
        extension.approve("admin-1", utc(2024, 1, 13), notes="ok")
        assert extension.status == ExtensionStatus.APPROVED
        assert extension.reviewed_by == "admin-1"
        assert extension.reviewed_at == utc(2024, 1, 13)

    def test_cannot_review_twice(self):
        extension = self._extension()
        extension.reject("admin-1", utc(2024, 1, 13))
        with pytest.raises(InvalidExtensionStatusError):
            extension.approve("admin-1", utc(2024, 1, 13))


class TestLateFee:
    def test_four_hours_overdue(self):
        fee = LateFee.compute(
            booking_id=1,
            original_return_date=utc(2024, 1, 10, 10),
            now=utc(2024, 1, 10, 14),
            hourly_rate=Decimal("100"),
        )
        assert fee.hours_overdue == 4
        assert fee.total_late_fee == Decimal("400.00")
        assert fee.payment_status == LateFeePaymentStatus.PENDING

    def test_partial_hours_floor_with_minimum_one(self):
        assert count_overdue_hours(utc(2024, 1, 10, 10), utc(2024, 1, 10, 14, 59)) == 4
        assert count_overdue_hours(utc(2024, 1, 10, 10), utc(2024, 1, 10, 10, 10)) == 1

    def test_close_fixes_total(self):
        fee = LateFee.compute(1, utc(2024, 1, 10, 10), utc(2024, 1, 10, 12), Decimal("100"))
        fee.close(utc(2024, 1, 10, 16), utc(2024, 1, 10, 17))
        assert fee.is_closed
        assert fee.hours_overdue == 6
        assert fee.total_late_fee == Decimal("600.00")

    def test_close_before_due_date_fails(self):
        fee = LateFee.compute(1, utc(2024, 1, 10, 10), utc(2024, 1, 10, 12), Decimal("100"))
        with pytest.raises(ValidationError):
            fee.close(utc(2024, 1, 10, 9), utc(2024, 1, 10, 12))

    def test_partial_payment_keeps_fee_pending(self):
        fee = LateFee.compute(1, utc(2024, 1, 10, 10), utc(2024, 1, 10, 14), Decimal("100"))
        fee.register_payment(Decimal("150"), utc(2024, 1, 10, 15))
        assert not fee.is_settled
        assert fee.outstanding == Decimal("250.00")
        fee.register_payment(Decimal("250"), utc(2024, 1, 10, 16))
        assert fee.payment_status == LateFeePaymentStatus.PAID

    def test_paid_fee_reopens_when_close_raises_total(self):
        fee = LateFee.compute(1, utc(2024, 1, 10, 10), utc(2024, 1, 10, 14), Decimal("100"))
        fee.register_payment(Decimal("400"), utc(2024, 1, 10, 15))
        assert fee.is_settled

        fee.close(utc(2024, 1, 11, 10), utc(2024, 1, 11, 11))

        assert fee.total_late_fee == Decimal("2400.00")
        assert fee.payment_status == LateFeePaymentStatus.PENDING
        assert not fee.is_settled
        assert fee.outstanding == Decimal("2000.00")

    def test_waived_fee_stays_waived_after_recompute(self):
        fee = LateFee.compute(1, utc(2024, 1, 10, 10), utc(2024, 1, 10, 14), Decimal("100"))
        fee.payment_status = LateFeePaymentStatus.WAIVED
        fee.close(utc(2024, 1, 11, 10), utc(2024, 1, 11, 11))
        assert fee.payment_status == LateFeePaymentStatus.WAIVED
        assert fee.is_settled


class TestPayment:
    def _payment(self, payment_type=PaymentType.RENTAL, amount="5000") -> Payment:
        return Payment.create_pending(
            booking_id=1,
            payment_type=payment_type,
            amount=Decimal(amount),
            created_at=utc(2024, 1, 1),
        )

    def test_deposit_type_implies_deposit_flag(self):
        assert self._payment(PaymentType.DEPOSIT).is_deposit

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            self._payment(amount="0")

    def test_settlement_transitions(self):
        payment = self._payment()
        payment.settle(PaymentStatus.PAID, utc(2024, 1, 2))
        payment.settle(PaymentStatus.REFUNDED, utc(2024, 1, 3))
        assert payment.is_final

        failed = self._payment()
        failed.settle(PaymentStatus.FAILED, utc(2024, 1, 2))
        with pytest.raises(InvalidPaymentStatusError):
            failed.settle(PaymentStatus.PAID, utc(2024, 1, 2))

    def test_refund_deposit_rules(self):
        deposit = self._payment(PaymentType.DEPOSIT, amount="3000")
        with pytest.raises(InvalidPaymentStatusError):
            deposit.refund_deposit(Decimal("100"), utc(2024, 1, 2))

        deposit.settle(PaymentStatus.PAID, utc(2024, 1, 2))
        with pytest.raises(ValidationError):
            deposit.refund_deposit(Decimal("3000.01"), utc(2024, 1, 3))

        deposit.refund_deposit(Decimal("2500"), utc(2024, 1, 3))
        assert deposit.deposit_refunded
        assert deposit.deposit_refund_amount == Decimal("2500")
        with pytest.raises(InvalidPaymentStatusError):
            deposit.refund_deposit(Decimal("1"), utc(2024, 1, 4))

    def test_refund_requires_deposit(self):
        rental = self._payment()
        rental.settle(PaymentStatus.PAID, utc(2024, 1, 2))
        with pytest.raises(ValidationError):
            rental.refund_deposit(Decimal("1"), utc(2024, 1, 3))

    def test_calculate_deposit_refund_never_negative(self):
        assert calculate_deposit_refund(Decimal("3000"), late_fees=Decimal("400")) == Decimal("2600")
        assert calculate_deposit_refund(Decimal("1000"), damage_charges=Decimal("5000")) == Decimal("0")


class TestMisc:
    def test_vehicle_pickup_locations(self):
        anywhere = Vehicle(id=1, name="Vios", daily_rate=Decimal("1000"))
        restricted = Vehicle(id=2, name="Montero", daily_rate=Decimal("3500"), locations=["Makati"])
        assert anywhere.allows_pickup_at("Cebu")
        assert restricted.allows_pickup_at("Makati")
        assert restricted.allows_pickup_at(None)
        assert not restricted.allows_pickup_at("Cebu")

    def test_booking_reference_format(self):
        reference = BookingReference.generate(utc(2024, 1, 1))
        assert re.fullmatch(r"BR-[0-9A-Z]+-[0-9A-Z]{4}", str(reference))
