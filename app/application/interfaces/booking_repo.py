from datetime import datetime
from typing import Sequence

from app.domain.entities.booking import Booking, BookingStatus


class BookingRepo:
    async def get(self, booking_id: int) -> Booking | None:
        raise NotImplementedError

    async def find_all(
        self,
        vehicle_id: int | None = None,
        requester_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> Sequence[Booking]:
        raise NotImplementedError

    async def find_overlapping(
        self,
        vehicle_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: int | None = None,
    ) -> Sequence[Booking]:
        """Bookings of the vehicle holding [start, end), ignoring rejected and cancelled ones."""
        raise NotImplementedError

    async def list_overdue(self, now: datetime) -> Sequence[Booking]:
        """Ongoing bookings whose return date is before `now`."""
        raise NotImplementedError

    async def create(self, booking: Booking) -> Booking:
        raise NotImplementedError

    async def update(self, booking: Booking) -> Booking:
        """Persists the booking if its lock_version is unchanged, then bumps it."""
        raise NotImplementedError
