from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.extension_repo import ExtensionRepo
from app.domain.entities.extension import Extension, ExtensionStatus
from app.domain.errors import PendingExtensionExistsError
from app.infrastructure.db.datetimes import from_db, to_db
from app.infrastructure.db.tables import rental_extensions


class ExtensionRepoSQL(ExtensionRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, extension_id: int) -> Extension | None:
        stmt = select(rental_extensions).where(rental_extensions.c.id == extension_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_extension(row) if row else None

    async def find_pending(self, booking_id: int) -> Extension | None:
        stmt = select(rental_extensions).where(
            rental_extensions.c.booking_id == booking_id,
            rental_extensions.c.status == ExtensionStatus.PENDING.value,
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_extension(row) if row else None

    async def find_all(
        self,
        booking_id: int | None = None,
        status: ExtensionStatus | None = None,
    ) -> Sequence[Extension]:
        stmt = select(rental_extensions).order_by(rental_extensions.c.id)
        if booking_id is not None:
            stmt = stmt.where(rental_extensions.c.booking_id == booking_id)
        if status is not None:
            stmt = stmt.where(rental_extensions.c.status == ExtensionStatus(status).value)
        result = await self._session.execute(stmt)
        return [self._map_extension(row) for row in result.mappings().all()]

    async def create(self, extension: Extension) -> Extension:
        stmt = insert(rental_extensions).values(
            booking_id=extension.booking_id,
            requester_id=extension.requester_id,
            original_return_date=to_db(extension.original_return_date),
            new_return_date=to_db(extension.new_return_date),
            requested_extension_days=extension.requested_extension_days,
            extension_fee=extension.extension_fee,
            status=extension.status.value,
            admin_notes=extension.admin_notes,
            reviewed_by=extension.reviewed_by,
            reviewed_at=to_db(extension.reviewed_at),
            created_at=to_db(extension.created_at),
            updated_at=to_db(extension.updated_at),
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            raise PendingExtensionExistsError(extension.booking_id) from exc
        extension_id = result.inserted_primary_key[0]
        return await self.get(extension_id)

    async def update(self, extension: Extension) -> Extension:
        stmt = (
            update(rental_extensions)
            .where(rental_extensions.c.id == extension.id)
            .values(
                status=extension.status.value,
                admin_notes=extension.admin_notes,
                reviewed_by=extension.reviewed_by,
                reviewed_at=to_db(extension.reviewed_at),
                updated_at=to_db(extension.updated_at),
            )
        )
        await self._session.execute(stmt)
        return await self.get(extension.id)

    def _map_extension(self, row) -> Extension:
        return Extension(
            id=row["id"],
            booking_id=row["booking_id"],
            requester_id=row["requester_id"],
            original_return_date=from_db(row["original_return_date"]),
            new_return_date=from_db(row["new_return_date"]),
            requested_extension_days=row["requested_extension_days"],
            extension_fee=row["extension_fee"],
            status=ExtensionStatus(row["status"]),
            admin_notes=row.get("admin_notes"),
            reviewed_by=row.get("reviewed_by"),
            reviewed_at=from_db(row.get("reviewed_at")),
            created_at=from_db(row.get("created_at")),
            updated_at=from_db(row.get("updated_at")),
        )
