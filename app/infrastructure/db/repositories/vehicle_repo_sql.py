from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.vehicle_repo import VehicleRepo
from app.domain.entities.vehicle import Vehicle
from app.infrastructure.db.datetimes import from_db, to_db
from app.infrastructure.db.tables import vehicles


class VehicleRepoSQL(VehicleRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, vehicle_id: int) -> Vehicle | None:
        stmt = select(vehicles).where(vehicles.c.id == vehicle_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_vehicle(row) if row else None

    async def get_for_update(self, vehicle_id: int) -> Vehicle | None:
        stmt = select(vehicles).where(vehicles.c.id == vehicle_id).with_for_update()
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_vehicle(row) if row else None

    async def create(self, vehicle: Vehicle) -> Vehicle:
        values = dict(
            name=vehicle.name,
            daily_rate=vehicle.daily_rate,
            weekly_rate=vehicle.weekly_rate,
            monthly_rate=vehicle.monthly_rate,
            available=vehicle.available,
            locations=list(vehicle.locations),
            created_at=to_db(vehicle.created_at),
            updated_at=to_db(vehicle.updated_at),
        )
        if vehicle.id is not None:
            values["id"] = vehicle.id
        result = await self._session.execute(insert(vehicles).values(**values))
        vehicle_id = result.inserted_primary_key[0]
        return await self.get(vehicle_id)

    def _map_vehicle(self, row) -> Vehicle:
        return Vehicle(
            id=row["id"],
            name=row["name"],
            daily_rate=row["daily_rate"],
            weekly_rate=row.get("weekly_rate"),
            monthly_rate=row.get("monthly_rate"),
            available=bool(row["available"]),
            locations=list(row.get("locations") or []),
            created_at=from_db(row.get("created_at")),
            updated_at=from_db(row.get("updated_at")),
        )
