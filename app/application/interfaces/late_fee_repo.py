from typing import Sequence

from app.domain.entities.late_fee import LateFee


class LateFeeRepo:
    async def get(self, late_fee_id: int) -> LateFee | None:
        raise NotImplementedError

    async def get_by_booking(self, booking_id: int) -> LateFee | None:
        raise NotImplementedError

    async def find_all(self, booking_id: int | None = None) -> Sequence[LateFee]:
        raise NotImplementedError

    async def create(self, late_fee: LateFee) -> LateFee:
        """Raises LateFeeAlreadyExistsError if the booking already has a late fee."""
        raise NotImplementedError

    async def update(self, late_fee: LateFee) -> LateFee:
        raise NotImplementedError
