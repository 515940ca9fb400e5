from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_actor_id, get_use_cases
from app.api.schemas.payments import (
    PaymentResponse,
    RecordPaymentRequest,
    RefundDepositRequest,
    SettlePaymentRequest,
)

router = APIRouter()


@router.post(
    "/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    payload: RecordPaymentRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> PaymentResponse:
    payment = await use_cases["payments"].record(
        booking_id=payload.booking_id,
        payment_type=payload.payment_type,
        amount=payload.amount,
        is_deposit=payload.is_deposit,
        payer_id=actor_id,
        payment_method=payload.payment_method,
        reference_number=payload.reference_number,
        transaction_id=payload.transaction_id,
    )
    return PaymentResponse.model_validate(payment)


@router.put(
    "/payments/{payment_id}/status",
    response_model=PaymentResponse,
    status_code=status.HTTP_200_OK,
)
async def settle_payment(
    payment_id: int,
    payload: SettlePaymentRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> PaymentResponse:
    payment = await use_cases["payments"].settle(
        payment_id=payment_id, status=payload.status, actor_id=actor_id
    )
    return PaymentResponse.model_validate(payment)


@router.post(
    "/payments/{payment_id}/deposit-refund",
    response_model=PaymentResponse,
    status_code=status.HTTP_200_OK,
)
async def refund_deposit(
    payment_id: int,
    payload: RefundDepositRequest,
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> PaymentResponse:
    payment = await use_cases["payments"].refund_deposit(
        payment_id=payment_id, amount=payload.amount, actor_id=actor_id
    )
    return PaymentResponse.model_validate(payment)


@router.get(
    "/payments",
    response_model=list[PaymentResponse],
    status_code=status.HTTP_200_OK,
)
async def list_payments(
    booking_id: int = Query(...),
    actor_id: str = Depends(get_actor_id),
    use_cases=Depends(get_use_cases),
) -> list[PaymentResponse]:
    payments = await use_cases["payments"].list_for_booking(booking_id, actor_id)
    return [PaymentResponse.model_validate(payment) for payment in payments]
