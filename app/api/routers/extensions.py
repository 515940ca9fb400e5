from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_actor_id, get_use_cases
from app.api.schemas.extensions import (
    ExtensionResponse,
    RequestExtensionRequest,
    ReviewExtensionRequest,
)
from app.domain.entities.extension import ExtensionStatus

router = APIRouter()


@router.post(
    "/extensions",
    response_model=ExtensionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_extension(
    payload: RequestExtensionRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> ExtensionResponse:
    extension = await use_cases["extensions"].request(
        booking_id=payload.booking_id,
        requester_id=actor_id,
        new_return_date=payload.new_return_date,
    )
    return ExtensionResponse.model_validate(extension)


@router.put(
    "/extensions/{extension_id}",
    response_model=ExtensionResponse,
    status_code=status.HTTP_200_OK,
)
async def review_extension(
    extension_id: int,
    payload: ReviewExtensionRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> ExtensionResponse:
    extension = await use_cases["extensions"].review(
        extension_id=extension_id,
        decision=payload.decision,
        actor_id=actor_id,
        notes=payload.admin_notes,
    )
    return ExtensionResponse.model_validate(extension)


@router.get(
    "/extensions",
    response_model=list[ExtensionResponse],
    status_code=status.HTTP_200_OK,
)
async def list_extensions(
    booking_id: int | None = Query(default=None),
    extension_status: ExtensionStatus | None = Query(default=None, alias="status"),
    use_cases=Depends(get_use_cases),
) -> list[ExtensionResponse]:
    extensions = await use_cases["extensions"].list_extensions(
        booking_id=booking_id, status=extension_status
    )
    return [ExtensionResponse.model_validate(extension) for extension in extensions]
