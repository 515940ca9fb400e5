from typing import Sequence

from app.domain.entities.payment import Payment


class PaymentRepo:
    async def get(self, payment_id: int) -> Payment | None:
        raise NotImplementedError

    async def get_for_update(self, payment_id: int) -> Payment | None:
        raise NotImplementedError

    async def list_by_booking(self, booking_id: int) -> Sequence[Payment]:
        raise NotImplementedError

    async def create(self, payment: Payment) -> Payment:
        raise NotImplementedError

    async def update(self, payment: Payment) -> Payment:
        raise NotImplementedError
