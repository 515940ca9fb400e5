from decimal import Decimal

import pytest

from conftest import ADMIN_ID, CUSTOMER_ID, OTHER_CUSTOMER_ID, utc

from app.domain.entities.booking import BookingPaymentStatus, BookingStatus
from app.domain.entities.late_fee import LateFeePaymentStatus
from app.domain.entities.payment import PaymentMethod, PaymentStatus, PaymentType
from app.domain.errors import (
    BookingNotFoundError,
    InvalidPaymentStatusError,
    LateFeeNotFoundError,
    PaymentNotFoundError,
    PermissionDeniedError,
    UnsettledLateFeeError,
    ValidationError,
)


@pytest.fixture
async def booking(harness):
    vehicle = await harness.add_vehicle()
    return await harness.confirmed_booking(vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))


@pytest.mark.asyncio
async def test_rental_payment_marks_booking_paid(harness, booking):
    payment = await harness.payments.record(
        booking.id,
        PaymentType.RENTAL,
        Decimal("5000"),
        payer_id=CUSTOMER_ID,
        payment_method=PaymentMethod.GCASH,
        reference_number="GC-123",
    )
    assert payment.status == PaymentStatus.PENDING
    assert payment.payment_method == PaymentMethod.GCASH

    settled = await harness.payments.settle(payment.id, "paid", ADMIN_ID)

    assert settled.status == PaymentStatus.PAID
    stored = await harness.bookings.get(booking.id)
    assert stored.payment_status == BookingPaymentStatus.PAID
    assert stored.status == BookingStatus.CONFIRMED


@pytest.mark.asyncio
async def test_rental_refund_marks_booking_refunded(harness, booking):
    payment = await harness.payments.record(booking.id, "rental", Decimal("5000"))
    await harness.payments.settle(payment.id, PaymentStatus.PAID, ADMIN_ID)

    await harness.payments.settle(payment.id, PaymentStatus.REFUNDED, ADMIN_ID)

    stored = await harness.bookings.get(booking.id)
    assert stored.payment_status == BookingPaymentStatus.REFUNDED


@pytest.mark.asyncio
async def test_failed_payment_cannot_be_paid(harness, booking):
    payment = await harness.payments.record(booking.id, "rental", Decimal("5000"))
    await harness.payments.settle(payment.id, "failed", ADMIN_ID)

    with pytest.raises(InvalidPaymentStatusError):
        await harness.payments.settle(payment.id, "paid", ADMIN_ID)

    stored = await harness.bookings.get(booking.id)
    assert stored.payment_status == BookingPaymentStatus.PENDING


@pytest.mark.asyncio
async def test_deposit_refund(harness, booking):
    deposit = await harness.payments.record(booking.id, PaymentType.DEPOSIT, Decimal("3000"))
    assert deposit.is_deposit
    await harness.payments.settle(deposit.id, "paid", ADMIN_ID)

    refunded = await harness.payments.refund_deposit(deposit.id, Decimal("2600"), ADMIN_ID)

    assert refunded.deposit_refunded
    assert refunded.deposit_refund_amount == Decimal("2600")
    assert refunded.deposit_refunded_at == harness.clock.now()


@pytest.mark.asyncio
async def test_deposit_refund_capped_at_amount(harness, booking):
    deposit = await harness.payments.record(booking.id, PaymentType.DEPOSIT, Decimal("3000"))
    await harness.payments.settle(deposit.id, "paid", ADMIN_ID)

    with pytest.raises(ValidationError):
        await harness.payments.refund_deposit(deposit.id, Decimal("3500"), ADMIN_ID)


@pytest.mark.asyncio
async def test_late_fee_payment_needs_a_late_fee(harness, booking):
    with pytest.raises(LateFeeNotFoundError):
        await harness.payments.record(booking.id, PaymentType.LATE_FEE, Decimal("400"))


@pytest.mark.asyncio
async def test_late_fee_payment_settles_fee_and_unblocks_completion(harness, clock):
    vehicle = await harness.add_vehicle()
    booking = await harness.ongoing_booking(vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
    clock.set_time(utc(2024, 1, 15, 14))
    late_fee = await harness.late_fees.compute(booking.id, ADMIN_ID)

    payment = await harness.payments.record(booking.id, PaymentType.LATE_FEE, Decimal("400"))
    await harness.payments.settle(payment.id, "paid", ADMIN_ID)

    stored_fee = await harness.late_fees.get(late_fee.id)
    assert stored_fee.payment_status == LateFeePaymentStatus.PAID
    assert stored_fee.paid_amount == Decimal("400")
    completed = await harness.bookings.complete(booking.id, ADMIN_ID)
    assert completed.status == BookingStatus.COMPLETED


@pytest.mark.asyncio
async def test_list_for_booking(harness, booking):
    first = await harness.payments.record(booking.id, "rental", Decimal("5000"))
    second = await harness.payments.record(booking.id, "deposit", Decimal("3000"))

    payments = await harness.payments.list_for_booking(booking.id, CUSTOMER_ID)

    assert [payment.id for payment in payments] == [first.id, second.id]


@pytest.mark.asyncio
async def test_unknown_references(harness):
    with pytest.raises(BookingNotFoundError):
        await harness.payments.record(404, "rental", Decimal("100"))
    with pytest.raises(PaymentNotFoundError):
        await harness.payments.settle(404, "paid", ADMIN_ID)


@pytest.mark.asyncio
async def test_paid_late_fee_reopens_when_closed_later(harness, clock):
    vehicle = await harness.add_vehicle()
    booking = await harness.ongoing_booking(vehicle.id, utc(2024, 1, 10, 10), utc(2024, 1, 15, 10))
    clock.set_time(utc(2024, 1, 15, 14))
    late_fee = await harness.late_fees.compute(booking.id, ADMIN_ID)
    payment = await harness.payments.record(booking.id, PaymentType.LATE_FEE, Decimal("400"))
    await harness.payments.settle(payment.id, "paid", ADMIN_ID)

    closed = await harness.late_fees.close(
        late_fee.id, ADMIN_ID, actual_return_date=utc(2024, 1, 16, 10)
    )

    assert closed.total_late_fee == Decimal("2400.00")
    assert closed.paid_amount == Decimal("400")
    assert closed.payment_status == LateFeePaymentStatus.PENDING
    assert closed.outstanding == Decimal("2000.00")
    with pytest.raises(UnsettledLateFeeError):
        await harness.bookings.complete(booking.id, ADMIN_ID)

    rest = await harness.payments.record(booking.id, PaymentType.LATE_FEE, Decimal("2000"))
    await harness.payments.settle(rest.id, "paid", ADMIN_ID)
    completed = await harness.bookings.complete(booking.id, ADMIN_ID)
    assert completed.status == BookingStatus.COMPLETED


@pytest.mark.asyncio
async def test_settle_and_refund_require_privileged_actor(harness, booking):
    deposit = await harness.payments.record(booking.id, PaymentType.DEPOSIT, Decimal("3000"))

    with pytest.raises(PermissionDeniedError):
        await harness.payments.settle(deposit.id, "paid", CUSTOMER_ID)
    with pytest.raises(PermissionDeniedError):
        await harness.payments.settle(deposit.id, "paid", None)

    await harness.payments.settle(deposit.id, "paid", ADMIN_ID)
    with pytest.raises(PermissionDeniedError):
        await harness.payments.refund_deposit(deposit.id, Decimal("3000"), CUSTOMER_ID)

    stored = await harness.payments.get(deposit.id)
    assert stored.status == PaymentStatus.PAID
    assert not stored.deposit_refunded


@pytest.mark.asyncio
async def test_list_for_booking_hidden_from_other_customers(harness, booking):
    await harness.payments.record(booking.id, "rental", Decimal("5000"))

    with pytest.raises(PermissionDeniedError):
        await harness.payments.list_for_booking(booking.id, OTHER_CUSTOMER_ID)
    assert len(await harness.payments.list_for_booking(booking.id, ADMIN_ID)) == 1
    with pytest.raises(BookingNotFoundError):
        await harness.payments.list_for_booking(404, ADMIN_ID)
