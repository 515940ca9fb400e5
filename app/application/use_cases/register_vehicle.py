import logging

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.vehicle_repo import VehicleRepo
from app.domain.entities.vehicle import Vehicle
from app.domain.errors import PermissionDeniedError, ValidationError, VehicleNotFoundError


class RegisterVehicleUseCase:
    """Seeds the fleet read model so the service can run stand-alone."""

    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        authorizer: Authorizer,
        transaction_manager: TransactionManager,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._authorizer = authorizer
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def get(self, vehicle_id: int) -> Vehicle:
        vehicle = await self._vehicle_repo.get(vehicle_id)
        if not vehicle:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    async def execute(self, vehicle: Vehicle, actor_id: str | None) -> Vehicle:
        if not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, "register vehicle")
        if vehicle.daily_rate <= 0:
            raise ValidationError("daily_rate", "debe ser mayor que cero")

        async def work() -> Vehicle:
            return await self._vehicle_repo.create(vehicle)

        created = await self._transaction_manager.run(work)
        self._logger.info(
            "Vehicle registered",
            extra={"vehicle_id": created.id, "vehicle_name": created.name, "actor_id": actor_id},
        )
        return created
