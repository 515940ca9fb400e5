from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment, PaymentMethod, PaymentStatus, PaymentType
from app.infrastructure.db.datetimes import from_db, to_db
from app.infrastructure.db.tables import payments


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, payment_id: int) -> Payment | None:
        stmt = select(payments).where(payments.c.id == payment_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    async def get_for_update(self, payment_id: int) -> Payment | None:
        stmt = select(payments).where(payments.c.id == payment_id).with_for_update()
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    async def list_by_booking(self, booking_id: int) -> Sequence[Payment]:
        stmt = (
            select(payments)
            .where(payments.c.booking_id == booking_id)
            .order_by(payments.c.id)
        )
        result = await self._session.execute(stmt)
        return [self._map_payment(row) for row in result.mappings().all()]

    async def create(self, payment: Payment) -> Payment:
        stmt = insert(payments).values(
            booking_id=payment.booking_id,
            payer_id=payment.payer_id,
            payment_type=payment.payment_type.value,
            payment_method=payment.payment_method.value if payment.payment_method else None,
            amount=payment.amount,
            status=payment.status.value,
            is_deposit=payment.is_deposit,
            deposit_refunded=payment.deposit_refunded,
            deposit_refund_amount=payment.deposit_refund_amount,
            deposit_refunded_at=to_db(payment.deposit_refunded_at),
            reference_number=payment.reference_number,
            transaction_id=payment.transaction_id,
            admin_notes=payment.admin_notes,
            created_at=to_db(payment.created_at),
            updated_at=to_db(payment.updated_at),
        )
        result = await self._session.execute(stmt)
        payment_id = result.inserted_primary_key[0]
        return await self.get(payment_id)

    async def update(self, payment: Payment) -> Payment:
        stmt = (
            update(payments)
            .where(payments.c.id == payment.id)
            .values(
                status=payment.status.value,
                deposit_refunded=payment.deposit_refunded,
                deposit_refund_amount=payment.deposit_refund_amount,
                deposit_refunded_at=to_db(payment.deposit_refunded_at),
                reference_number=payment.reference_number,
                transaction_id=payment.transaction_id,
                admin_notes=payment.admin_notes,
                updated_at=to_db(payment.updated_at),
            )
        )
        await self._session.execute(stmt)
        return await self.get(payment.id)

    def _map_payment(self, row) -> Payment:
        method = row.get("payment_method")
        return Payment(
            id=row["id"],
            booking_id=row["booking_id"],
            payer_id=row.get("payer_id"),
            payment_type=PaymentType(row["payment_type"]),
            payment_method=PaymentMethod(method) if method else None,
            amount=row["amount"],
            status=PaymentStatus(row["status"]),
            is_deposit=bool(row["is_deposit"]),
            deposit_refunded=bool(row["deposit_refunded"]),
            deposit_refund_amount=row.get("deposit_refund_amount"),
            deposit_refunded_at=from_db(row.get("deposit_refunded_at")),
            reference_number=row.get("reference_number"),
            transaction_id=row.get("transaction_id"),
            admin_notes=row.get("admin_notes"),
            created_at=from_db(row.get("created_at")),
            updated_at=from_db(row.get("updated_at")),
        )
