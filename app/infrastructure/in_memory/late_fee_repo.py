from copy import deepcopy
from typing import Sequence

from app.application.interfaces.late_fee_repo import LateFeeRepo
from app.domain.entities.late_fee import LateFee
from app.domain.errors import LateFeeAlreadyExistsError, LateFeeNotFoundError


class InMemoryLateFeeRepo(LateFeeRepo):
    def __init__(self) -> None:
        self.late_fees: dict[int, LateFee] = {}
        self._next_id = 1

    async def get(self, late_fee_id: int) -> LateFee | None:
        late_fee = self.late_fees.get(late_fee_id)
        return deepcopy(late_fee) if late_fee else None

    async def get_by_booking(self, booking_id: int) -> LateFee | None:
        for late_fee in self.late_fees.values():
            if late_fee.booking_id == booking_id:
                return deepcopy(late_fee)
        return None

    async def find_all(self, booking_id: int | None = None) -> Sequence[LateFee]:
        return [
            deepcopy(late_fee)
            for late_fee in self.late_fees.values()
            if booking_id is None or late_fee.booking_id == booking_id
        ]

    async def create(self, late_fee: LateFee) -> LateFee:
        existing = await self.get_by_booking(late_fee.booking_id)
        if existing:
            raise LateFeeAlreadyExistsError(late_fee.booking_id, existing.id)
        late_fee = deepcopy(late_fee)
        late_fee.id = self._next_id
        self._next_id += 1
        self.late_fees[late_fee.id] = late_fee
        return deepcopy(late_fee)

    async def update(self, late_fee: LateFee) -> LateFee:
        if late_fee.id not in self.late_fees:
            raise LateFeeNotFoundError(late_fee_id=late_fee.id)
        self.late_fees[late_fee.id] = deepcopy(late_fee)
        return deepcopy(late_fee)
