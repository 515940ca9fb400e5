from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from app.api.schemas.common import DECIMAL_ENCODERS, NonNegativeMoney, PositiveMoney, as_utc
from app.domain.entities.late_fee import LateFeePaymentStatus


class ComputeLateFeeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: int
    hourly_rate: PositiveMoney | None = None


class UpdateLateFeeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    actual_return_date: datetime | None = None
    payment_status: LateFeePaymentStatus | None = None
    paid_amount: NonNegativeMoney | None = None

    @field_validator("actual_return_date")
    @classmethod
    def normalize_timezone(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class LateFeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, json_encoders=DECIMAL_ENCODERS)

    id: int
    booking_id: int
    original_return_date: datetime
    actual_return_date: datetime | None = None
    hours_overdue: int
    hourly_rate: Decimal
    total_late_fee: Decimal
    payment_status: LateFeePaymentStatus
    paid_amount: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LateFeeSweepResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created: list[int]
    refreshed: list[int]
    skipped: list[int]
