from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, constr

from app.api.schemas.common import DECIMAL_ENCODERS, PositiveMoney
from app.domain.entities.payment import PaymentMethod, PaymentStatus, PaymentType


class RecordPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: int
    payment_type: PaymentType
    amount: PositiveMoney
    is_deposit: bool = False
    payment_method: PaymentMethod | None = None
    reference_number: constr(strip_whitespace=True, max_length=100) | None = None
    transaction_id: constr(strip_whitespace=True, max_length=100) | None = None


class SettlePaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: PaymentStatus


class RefundDepositRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: PositiveMoney


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, json_encoders=DECIMAL_ENCODERS)

    id: int
    booking_id: int
    payer_id: str | None = None
    payment_type: PaymentType
    payment_method: PaymentMethod | None = None
    amount: Decimal
    status: PaymentStatus
    is_deposit: bool
    deposit_refunded: bool
    deposit_refund_amount: Decimal | None = None
    deposit_refunded_at: datetime | None = None
    reference_number: str | None = None
    transaction_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
