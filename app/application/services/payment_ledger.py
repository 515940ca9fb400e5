import logging
from decimal import Decimal
from typing import Sequence

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.late_fee_repo import LateFeeRepo
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.booking import BookingPaymentStatus
from app.domain.entities.payment import Payment, PaymentMethod, PaymentStatus, PaymentType
from app.domain.errors import (
    BookingNotFoundError,
    LateFeeNotFoundError,
    PaymentNotFoundError,
    PermissionDeniedError,
)


class PaymentLedger:
    """
    Record of payment facts asserted by external payment collaborators.

    Settling a rental payment marks the booking paid, and settling a late-fee
    payment credits the booking's late fee, in the same transaction. Any caller
    may record a pending payment; only privileged actors settle or refund.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        late_fee_repo: LateFeeRepo,
        authorizer: Authorizer,
        clock: Clock,
        transaction_manager: TransactionManager,
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._late_fee_repo = late_fee_repo
        self._authorizer = authorizer
        self._clock = clock
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def get(self, payment_id: int) -> Payment:
        payment = await self._payment_repo.get(payment_id)
        if not payment:
            raise PaymentNotFoundError(payment_id)
        return payment

    async def list_for_booking(self, booking_id: int, actor_id: str | None) -> Sequence[Payment]:
        """Payments of a booking, visible to its requester and to privileged actors."""
        booking = await self._booking_repo.get(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        if actor_id != booking.requester_id and not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, f"list payments of booking {booking_id}")
        return await self._payment_repo.list_by_booking(booking_id)

    async def record(
        self,
        booking_id: int,
        payment_type: PaymentType | str,
        amount: Decimal,
        is_deposit: bool = False,
        payer_id: str | None = None,
        payment_method: PaymentMethod | str | None = None,
        reference_number: str | None = None,
        transaction_id: str | None = None,
    ) -> Payment:
        payment_type = PaymentType(payment_type)
        method = PaymentMethod(payment_method) if payment_method else None

        async def work() -> Payment:
            booking = await self._booking_repo.get(booking_id)
            if not booking:
                raise BookingNotFoundError(booking_id)
            if payment_type == PaymentType.LATE_FEE:
                if not await self._late_fee_repo.get_by_booking(booking_id):
                    raise LateFeeNotFoundError(booking_id=booking_id)
            payment = Payment.create_pending(
                booking_id=booking.id,
                payment_type=payment_type,
                amount=Decimal(amount),
                created_at=self._clock.now(),
                is_deposit=is_deposit,
                payer_id=payer_id,
                payment_method=method,
                reference_number=reference_number,
                transaction_id=transaction_id,
            )
            return await self._payment_repo.create(payment)

        payment = await self._transaction_manager.run(work)
        self._logger.info(
            "Payment recorded",
            extra={
                "payment_id": payment.id,
                "booking_id": booking_id,
                "payment_type": payment.payment_type.value,
                "amount": str(payment.amount),
                "is_deposit": payment.is_deposit,
            },
        )
        return payment

    async def settle(
        self, payment_id: int, status: PaymentStatus | str, actor_id: str | None
    ) -> Payment:
        self._require_privileged(actor_id, f"settle payment {payment_id}")
        status = PaymentStatus(status)

        async def work() -> Payment:
            payment = await self._payment_repo.get_for_update(payment_id)
            if not payment:
                raise PaymentNotFoundError(payment_id)
            now = self._clock.now()
            payment.settle(status, now)
            if payment.payment_type == PaymentType.RENTAL and status in (
                PaymentStatus.PAID,
                PaymentStatus.REFUNDED,
            ):
                booking = await self._booking_repo.get(payment.booking_id)
                if not booking:
                    raise BookingNotFoundError(payment.booking_id)
                if status == PaymentStatus.PAID:
                    booking.mark_as_paid(now)
                else:
                    booking.payment_status = BookingPaymentStatus.REFUNDED
                    booking.updated_at = now
                await self._booking_repo.update(booking)
            elif payment.payment_type == PaymentType.LATE_FEE and status == PaymentStatus.PAID:
                late_fee = await self._late_fee_repo.get_by_booking(payment.booking_id)
                if not late_fee:
                    raise LateFeeNotFoundError(booking_id=payment.booking_id)
                late_fee.register_payment(payment.amount, now)
                await self._late_fee_repo.update(late_fee)
            return await self._payment_repo.update(payment)

        payment = await self._transaction_manager.run(work)
        self._logger.info(
            "Payment settled",
            extra={
                "payment_id": payment.id,
                "booking_id": payment.booking_id,
                "payment_type": payment.payment_type.value,
                "status": payment.status.value,
                "actor_id": actor_id,
            },
        )
        return payment

    async def refund_deposit(
        self, payment_id: int, amount: Decimal, actor_id: str | None
    ) -> Payment:
        self._require_privileged(actor_id, f"refund deposit of payment {payment_id}")

        async def work() -> Payment:
            payment = await self._payment_repo.get_for_update(payment_id)
            if not payment:
                raise PaymentNotFoundError(payment_id)
            payment.refund_deposit(Decimal(amount), self._clock.now())
            return await self._payment_repo.update(payment)

        payment = await self._transaction_manager.run(work)
        self._logger.info(
            "Deposit refunded",
            extra={
                "payment_id": payment.id,
                "booking_id": payment.booking_id,
                "refund_amount": str(payment.deposit_refund_amount),
                "actor_id": actor_id,
            },
        )
        return payment

    def _require_privileged(self, actor_id: str | None, operation: str) -> None:
        if not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, operation)
