from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_actor_id, get_use_cases
from app.api.schemas.late_fees import ComputeLateFeeRequest, LateFeeResponse, UpdateLateFeeRequest

router = APIRouter()


@router.post(
    "/late-fees",
    response_model=LateFeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def compute_late_fee(
    payload: ComputeLateFeeRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> LateFeeResponse:
    late_fee = await use_cases["late_fees"].compute(
        booking_id=payload.booking_id,
        actor_id=actor_id,
        hourly_rate=payload.hourly_rate,
    )
    return LateFeeResponse.model_validate(late_fee)


@router.put(
    "/late-fees/{late_fee_id}",
    response_model=LateFeeResponse,
    status_code=status.HTTP_200_OK,
)
async def update_late_fee(
    late_fee_id: int,
    payload: UpdateLateFeeRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> LateFeeResponse:
    late_fee = await use_cases["late_fees"].close(
        late_fee_id=late_fee_id,
        actor_id=actor_id,
        actual_return_date=payload.actual_return_date,
        payment_status=payload.payment_status,
        paid_amount=payload.paid_amount,
    )
    return LateFeeResponse.model_validate(late_fee)


@router.get(
    "/late-fees",
    response_model=list[LateFeeResponse],
    status_code=status.HTTP_200_OK,
)
async def list_late_fees(
    booking_id: int | None = Query(default=None),
    use_cases=Depends(get_use_cases),
) -> list[LateFeeResponse]:
    late_fees = await use_cases["late_fees"].list_late_fees(booking_id=booking_id)
    return [LateFeeResponse.model_validate(late_fee) for late_fee in late_fees]
