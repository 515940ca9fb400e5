from datetime import date

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_actor_id, get_use_cases
from app.api.schemas.fleet import (
    CreatePeakSeasonRequest,
    CreateVehicleRequest,
    PeakPricingForDateResponse,
    PeakSeasonResponse,
    UpdatePeakSeasonRequest,
    VehicleResponse,
)
from app.domain.entities.peak_season_rule import PeakSeasonRule
from app.domain.entities.vehicle import Vehicle

router = APIRouter()


@router.post(
    "/vehicles",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_vehicle(
    payload: CreateVehicleRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> VehicleResponse:
    vehicle = await use_cases["vehicles"].execute(
        Vehicle(**payload.model_dump()), actor_id=actor_id
    )
    return VehicleResponse.model_validate(vehicle)


@router.get(
    "/vehicles/{vehicle_id}",
    response_model=VehicleResponse,
    status_code=status.HTTP_200_OK,
)
async def get_vehicle(
    vehicle_id: int,
    use_cases=Depends(get_use_cases),
) -> VehicleResponse:
    vehicle = await use_cases["vehicles"].get(vehicle_id)
    return VehicleResponse.model_validate(vehicle)


@router.get(
    "/peak-pricing",
    response_model=PeakPricingForDateResponse,
    status_code=status.HTTP_200_OK,
)
async def peak_pricing_for_date(
    day: date = Query(..., alias="date"),
    use_cases=Depends(get_use_cases),
) -> PeakPricingForDateResponse:
    result = await use_cases["peak_pricing"].for_date(day)
    return PeakPricingForDateResponse.model_validate(result)


@router.get(
    "/peak-pricing/rules",
    response_model=list[PeakSeasonResponse],
    status_code=status.HTTP_200_OK,
)
async def list_peak_season_rules(
    active_only: bool = Query(default=False),
    use_cases=Depends(get_use_cases),
) -> list[PeakSeasonResponse]:
    rules = await use_cases["peak_pricing"].list_rules(active_only=active_only)
    return [PeakSeasonResponse.model_validate(rule) for rule in rules]


@router.post(
    "/peak-pricing",
    response_model=PeakSeasonResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_peak_season_rule(
    payload: CreatePeakSeasonRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> PeakSeasonResponse:
    rule = await use_cases["peak_pricing"].create_rule(
        PeakSeasonRule(**payload.model_dump()), actor_id=actor_id
    )
    return PeakSeasonResponse.model_validate(rule)


@router.put(
    "/peak-pricing/{rule_id}",
    response_model=PeakSeasonResponse,
    status_code=status.HTTP_200_OK,
)
async def update_peak_season_rule(
    rule_id: int,
    payload: UpdatePeakSeasonRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> PeakSeasonResponse:
    rule = await use_cases["peak_pricing"].update_rule(
        rule_id, payload.changes(), actor_id=actor_id
    )
    return PeakSeasonResponse.model_validate(rule)
