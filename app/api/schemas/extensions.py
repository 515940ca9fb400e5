from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from app.api.schemas.common import DECIMAL_ENCODERS, as_utc
from app.domain.entities.extension import ExtensionDecision, ExtensionStatus


class RequestExtensionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: int
    new_return_date: datetime

    @field_validator("new_return_date")
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return as_utc(value)


class ReviewExtensionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    decision: ExtensionDecision
    admin_notes: str | None = None


class ExtensionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, json_encoders=DECIMAL_ENCODERS)

    id: int
    booking_id: int
    requester_id: str
    original_return_date: datetime
    new_return_date: datetime
    requested_extension_days: int
    extension_fee: Decimal
    status: ExtensionStatus
    admin_notes: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
