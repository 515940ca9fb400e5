from copy import deepcopy
from datetime import datetime
from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import RELEASED_STATUSES, Booking, BookingStatus
from app.domain.errors import BookingNotFoundError, OptimisticLockError


class InMemoryBookingRepo(BookingRepo):
    def __init__(self) -> None:
        self.bookings: dict[int, Booking] = {}
        self._next_id = 1

    async def get(self, booking_id: int) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return deepcopy(booking) if booking else None

    async def find_all(
        self,
        vehicle_id: int | None = None,
        requester_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> Sequence[Booking]:
        return [
            deepcopy(booking)
            for booking in self.bookings.values()
            if (vehicle_id is None or booking.vehicle_id == vehicle_id)
            and (requester_id is None or booking.requester_id == requester_id)
            and (status is None or booking.status == status)
        ]

    async def find_overlapping(
        self,
        vehicle_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: int | None = None,
    ) -> Sequence[Booking]:
        return [
            deepcopy(booking)
            for booking in self.bookings.values()
            if booking.vehicle_id == vehicle_id
            and booking.id != exclude_booking_id
            and booking.status not in RELEASED_STATUSES
            and start < booking.return_date
            and end > booking.pickup_date
        ]

    async def list_overdue(self, now: datetime) -> Sequence[Booking]:
        return [
            deepcopy(booking)
            for booking in self.bookings.values()
            if booking.status == BookingStatus.ONGOING and booking.return_date < now
        ]

    async def create(self, booking: Booking) -> Booking:
        booking = deepcopy(booking)
        booking.id = self._next_id
        self._next_id += 1
        self.bookings[booking.id] = booking
        return deepcopy(booking)

    async def update(self, booking: Booking) -> Booking:
        stored = self.bookings.get(booking.id)
        if not stored:
            raise BookingNotFoundError(booking.id)
        if stored.lock_version != booking.lock_version:
            raise OptimisticLockError(booking.id, booking.lock_version)
        booking = deepcopy(booking)
        booking.lock_version += 1
        self.bookings[booking.id] = booking
        return deepcopy(booking)
