from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, constr, field_validator

from app.api.schemas.common import DECIMAL_ENCODERS, as_utc
from app.domain.entities.booking import BookingAction, BookingPaymentStatus, BookingStatus
from app.domain.value_objects.price_breakdown import RateTier


class PriceBreakdownResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days: int
    daily_rate: Decimal
    subtotal: Decimal
    discount: Decimal
    peak_surcharge: Decimal
    applied_multiplier: Decimal
    rate_tier: RateTier
    total: Decimal


class AvailabilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle_id: int
    available: bool
    reason: str | None = None
    conflicting_booking_ids: list[int] = []
    pricing: PriceBreakdownResponse | None = None
    currency_code: str | None = None


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    vehicle_id: int
    pickup_date: datetime
    return_date: datetime
    pickup_location: constr(strip_whitespace=True, min_length=1, max_length=255) | None = None
    dropoff_location: constr(strip_whitespace=True, min_length=1, max_length=255) | None = None

    @field_validator("pickup_date", "return_date")
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return as_utc(value)


class TransitionBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    action: BookingAction
    notes: str | None = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, json_encoders=DECIMAL_ENCODERS)

    id: int
    booking_reference: str
    vehicle_id: int
    requester_id: str
    pickup_date: datetime
    return_date: datetime
    pickup_location: str | None = None
    dropoff_location: str | None = None
    status: BookingStatus
    payment_status: BookingPaymentStatus
    total_price: Decimal
    admin_notes: str | None = None
    lock_version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
