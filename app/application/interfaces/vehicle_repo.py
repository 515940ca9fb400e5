from app.domain.entities.vehicle import Vehicle


class VehicleRepo:
    async def get(self, vehicle_id: int) -> Vehicle | None:
        raise NotImplementedError

    async def get_for_update(self, vehicle_id: int) -> Vehicle | None:
        """Reads the vehicle and locks its row until the transaction ends."""
        raise NotImplementedError

    async def create(self, vehicle: Vehicle) -> Vehicle:
        raise NotImplementedError
