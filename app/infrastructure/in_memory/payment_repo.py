from copy import deepcopy
from typing import Sequence

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment
from app.domain.errors import PaymentNotFoundError


class InMemoryPaymentRepo(PaymentRepo):
    def __init__(self) -> None:
        self.payments: dict[int, Payment] = {}
        self._next_id = 1

    async def get(self, payment_id: int) -> Payment | None:
        payment = self.payments.get(payment_id)
        return deepcopy(payment) if payment else None

    async def get_for_update(self, payment_id: int) -> Payment | None:
        return await self.get(payment_id)

    async def list_by_booking(self, booking_id: int) -> Sequence[Payment]:
        return [
            deepcopy(payment)
            for payment in sorted(self.payments.values(), key=lambda p: p.id)
            if payment.booking_id == booking_id
        ]

    async def create(self, payment: Payment) -> Payment:
        payment = deepcopy(payment)
        payment.id = self._next_id
        self._next_id += 1
        self.payments[payment.id] = payment
        return deepcopy(payment)

    async def update(self, payment: Payment) -> Payment:
        if payment.id not in self.payments:
            raise PaymentNotFoundError(payment.id)
        self.payments[payment.id] = deepcopy(payment)
        return deepcopy(payment)
