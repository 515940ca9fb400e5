from datetime import datetime
from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import (
    RELEASED_STATUSES,
    Booking,
    BookingPaymentStatus,
    BookingStatus,
)
from app.domain.errors import OptimisticLockError
from app.infrastructure.db.datetimes import from_db, to_db
from app.infrastructure.db.tables import bookings


class BookingRepoSQL(BookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, booking_id: int) -> Booking | None:
        stmt = select(bookings).where(bookings.c.id == booking_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_booking(row) if row else None

    async def find_all(
        self,
        vehicle_id: int | None = None,
        requester_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> Sequence[Booking]:
        stmt = select(bookings).order_by(bookings.c.id)
        if vehicle_id is not None:
            stmt = stmt.where(bookings.c.vehicle_id == vehicle_id)
        if requester_id is not None:
            stmt = stmt.where(bookings.c.requester_id == requester_id)
        if status is not None:
            stmt = stmt.where(bookings.c.status == BookingStatus(status).value)
        result = await self._session.execute(stmt)
        return [self._map_booking(row) for row in result.mappings().all()]

    async def find_overlapping(
        self,
        vehicle_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: int | None = None,
    ) -> Sequence[Booking]:
        stmt = (
            select(bookings)
            .where(
                bookings.c.vehicle_id == vehicle_id,
                bookings.c.status.not_in([status.value for status in RELEASED_STATUSES]),
                bookings.c.pickup_date < to_db(end),
                bookings.c.return_date > to_db(start),
            )
            .order_by(bookings.c.pickup_date)
        )
        if exclude_booking_id is not None:
            stmt = stmt.where(bookings.c.id != exclude_booking_id)
        result = await self._session.execute(stmt)
        return [self._map_booking(row) for row in result.mappings().all()]

    async def list_overdue(self, now: datetime) -> Sequence[Booking]:
        stmt = (
            select(bookings)
            .where(
                bookings.c.status == BookingStatus.ONGOING.value,
                bookings.c.return_date < to_db(now),
            )
            .order_by(bookings.c.return_date)
        )
        result = await self._session.execute(stmt)
        return [self._map_booking(row) for row in result.mappings().all()]

    async def create(self, booking: Booking) -> Booking:
        stmt = insert(bookings).values(
            booking_reference=booking.booking_reference,
            vehicle_id=booking.vehicle_id,
            requester_id=booking.requester_id,
            pickup_date=to_db(booking.pickup_date),
            return_date=to_db(booking.return_date),
            pickup_location=booking.pickup_location,
            dropoff_location=booking.dropoff_location,
            status=booking.status.value,
            payment_status=booking.payment_status.value,
            total_price=booking.total_price,
            admin_notes=booking.admin_notes,
            lock_version=booking.lock_version,
            created_at=to_db(booking.created_at),
            updated_at=to_db(booking.updated_at),
        )
        result = await self._session.execute(stmt)
        booking_id = result.inserted_primary_key[0]
        return await self.get(booking_id)

    async def update(self, booking: Booking) -> Booking:
        stmt = (
            update(bookings)
            .where(
                bookings.c.id == booking.id,
                bookings.c.lock_version == booking.lock_version,
            )
            .values(
                return_date=to_db(booking.return_date),
                status=booking.status.value,
                payment_status=booking.payment_status.value,
                total_price=booking.total_price,
                admin_notes=booking.admin_notes,
                lock_version=booking.lock_version + 1,
                updated_at=to_db(booking.updated_at),
            )
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise OptimisticLockError(booking.id, booking.lock_version)
        return await self.get(booking.id)

    def _map_booking(self, row) -> Booking:
        return Booking(
            id=row["id"],
            booking_reference=row["booking_reference"],
            vehicle_id=row["vehicle_id"],
            requester_id=row["requester_id"],
            pickup_date=from_db(row["pickup_date"]),
            return_date=from_db(row["return_date"]),
            pickup_location=row.get("pickup_location"),
            dropoff_location=row.get("dropoff_location"),
            status=BookingStatus(row["status"]),
            payment_status=BookingPaymentStatus(row["payment_status"]),
            total_price=row["total_price"],
            admin_notes=row.get("admin_notes"),
            lock_version=row["lock_version"],
            created_at=from_db(row.get("created_at")),
            updated_at=from_db(row.get("updated_at")),
        )
