from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_actor_id, get_use_cases
from app.api.schemas.late_fees import LateFeeSweepResponse

router = APIRouter()


@router.post(
    "/workers/late-fees/sweep",
    response_model=LateFeeSweepResponse,
    status_code=status.HTTP_200_OK,
)
async def sweep_late_fees(
    actor_id: Annotated[str, Depends(get_actor_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> LateFeeSweepResponse:
    """
    Creates or refreshes the late fee of every overdue ongoing booking.

    Meant to be triggered by a scheduler running as a privileged actor;
    safe to run concurrently.
    """
    result = await use_cases["late_fees"].sweep(actor_id)
    return LateFeeSweepResponse.model_validate(result)
