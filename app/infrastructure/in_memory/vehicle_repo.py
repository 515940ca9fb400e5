from copy import deepcopy

from app.application.interfaces.vehicle_repo import VehicleRepo
from app.domain.entities.vehicle import Vehicle


class InMemoryVehicleRepo(VehicleRepo):
    def __init__(self) -> None:
        self.vehicles: dict[int, Vehicle] = {}
        self._next_id = 1

    async def get(self, vehicle_id: int) -> Vehicle | None:
        vehicle = self.vehicles.get(vehicle_id)
        return deepcopy(vehicle) if vehicle else None

    async def get_for_update(self, vehicle_id: int) -> Vehicle | None:
        # InMemoryTransactionManager already serialises transactions
        return await self.get(vehicle_id)

    async def create(self, vehicle: Vehicle) -> Vehicle:
        vehicle = deepcopy(vehicle)
        if vehicle.id is None:
            vehicle.id = self._next_id
        self._next_id = max(self._next_id, vehicle.id) + 1
        self.vehicles[vehicle.id] = vehicle
        return deepcopy(vehicle)
