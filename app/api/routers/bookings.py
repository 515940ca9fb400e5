from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_actor_id, get_use_cases
from app.api.schemas.bookings import (
    AvailabilityResponse,
    BookingResponse,
    CreateBookingRequest,
    TransitionBookingRequest,
)
from app.api.schemas.common import as_utc
from app.config import Settings, get_settings
from app.domain.entities.booking import BookingStatus

router = APIRouter()


@router.get(
    "/bookings/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def check_availability(
    vehicle_id: int,
    pickup_date: datetime,
    return_date: datetime,
    settings: Settings = Depends(get_settings),
    use_cases=Depends(get_use_cases),
) -> AvailabilityResponse:
    quote = await use_cases["check_availability"].execute(
        vehicle_id=vehicle_id,
        pickup_date=as_utc(pickup_date),
        return_date=as_utc(return_date),
    )
    response = AvailabilityResponse.model_validate(quote)
    response.currency_code = settings.currency_code
    return response


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["bookings"].create(
        vehicle_id=payload.vehicle_id,
        requester_id=actor_id,
        pickup_date=payload.pickup_date,
        return_date=payload.return_date,
        pickup_location=payload.pickup_location,
        dropoff_location=payload.dropoff_location,
    )
    return BookingResponse.model_validate(booking)


@router.post(
    "/bookings/{booking_id}/transitions",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
async def transition_booking(
    booking_id: int,
    payload: TransitionBookingRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["bookings"].transition(
        booking_id=booking_id,
        action=payload.action,
        actor_id=actor_id,
        notes=payload.notes,
    )
    return BookingResponse.model_validate(booking)


@router.get(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
async def get_booking(
    booking_id: int,
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["bookings"].get(booking_id)
    return BookingResponse.model_validate(booking)


@router.get(
    "/bookings",
    response_model=list[BookingResponse],
    status_code=status.HTTP_200_OK,
)
async def list_bookings(
    vehicle_id: int | None = Query(default=None),
    requester_id: str | None = Query(default=None),
    booking_status: BookingStatus | None = Query(default=None, alias="status"),
    use_cases=Depends(get_use_cases),
) -> list[BookingResponse]:
    bookings = await use_cases["bookings"].list_bookings(
        vehicle_id=vehicle_id, requester_id=requester_id, status=booking_status
    )
    return [BookingResponse.model_validate(booking) for booking in bookings]
