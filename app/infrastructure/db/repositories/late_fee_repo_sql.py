from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.late_fee_repo import LateFeeRepo
from app.domain.entities.late_fee import LateFee, LateFeePaymentStatus
from app.domain.errors import LateFeeAlreadyExistsError
from app.infrastructure.db.datetimes import from_db, to_db
from app.infrastructure.db.tables import late_fees


class LateFeeRepoSQL(LateFeeRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, late_fee_id: int) -> LateFee | None:
        stmt = select(late_fees).where(late_fees.c.id == late_fee_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_late_fee(row) if row else None

    async def get_by_booking(self, booking_id: int) -> LateFee | None:
        stmt = select(late_fees).where(late_fees.c.booking_id == booking_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_late_fee(row) if row else None

    async def find_all(self, booking_id: int | None = None) -> Sequence[LateFee]:
        stmt = select(late_fees).order_by(late_fees.c.id)
        if booking_id is not None:
            stmt = stmt.where(late_fees.c.booking_id == booking_id)
        result = await self._session.execute(stmt)
        return [self._map_late_fee(row) for row in result.mappings().all()]

    async def create(self, late_fee: LateFee) -> LateFee:
        stmt = insert(late_fees).values(
            booking_id=late_fee.booking_id,
            original_return_date=to_db(late_fee.original_return_date),
            actual_return_date=to_db(late_fee.actual_return_date),
            hours_overdue=late_fee.hours_overdue,
            hourly_rate=late_fee.hourly_rate,
            total_late_fee=late_fee.total_late_fee,
            payment_status=late_fee.payment_status.value,
            paid_amount=late_fee.paid_amount,
            created_at=to_db(late_fee.created_at),
            updated_at=to_db(late_fee.updated_at),
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            raise LateFeeAlreadyExistsError(late_fee.booking_id) from exc
        late_fee_id = result.inserted_primary_key[0]
        return await self.get(late_fee_id)

    async def update(self, late_fee: LateFee) -> LateFee:
        stmt = (
            update(late_fees)
            .where(late_fees.c.id == late_fee.id)
            .values(
                actual_return_date=to_db(late_fee.actual_return_date),
                hours_overdue=late_fee.hours_overdue,
                total_late_fee=late_fee.total_late_fee,
                payment_status=late_fee.payment_status.value,
                paid_amount=late_fee.paid_amount,
                updated_at=to_db(late_fee.updated_at),
            )
        )
        await self._session.execute(stmt)
        return await self.get(late_fee.id)

    def _map_late_fee(self, row) -> LateFee:
        return LateFee(
            id=row["id"],
            booking_id=row["booking_id"],
            original_return_date=from_db(row["original_return_date"]),
            actual_return_date=from_db(row.get("actual_return_date")),
            hours_overdue=row["hours_overdue"],
            hourly_rate=row["hourly_rate"],
            total_late_fee=row["total_late_fee"],
            payment_status=LateFeePaymentStatus(row["payment_status"]),
            paid_amount=row["paid_amount"],
            created_at=from_db(row.get("created_at")),
            updated_at=from_db(row.get("updated_at")),
        )
