"""Entidad Payment - registro del libro de pagos y depósitos de una reserva."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import InvalidPaymentStatusError, ValidationError


class PaymentStatus(str, Enum):
    """Estados posibles de un pago."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, Enum):
    """Concepto del pago."""

    RENTAL = "rental"
    DEPOSIT = "deposit"
    EXTENSION_FEE = "extension_fee"
    LATE_FEE = "late_fee"


class PaymentMethod(str, Enum):
    """Medios de pago aceptados (la captura ocurre fuera del núcleo)."""

    GCASH = "gcash"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYMAYA = "paymaya"
    CASH = "cash"


# estado destino -> estados de origen permitidos
SETTLEMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PAID: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.REFUNDED: frozenset({PaymentStatus.PAID}),
}


def calculate_deposit_refund(
    deposit_amount: Decimal,
    damage_charges: Decimal = Decimal("0"),
    late_fees: Decimal = Decimal("0"),
    fuel_charges: Decimal = Decimal("0"),
) -> Decimal:
    """Monto a devolver de un depósito tras descontar cargos, nunca negativo."""
    deductions = damage_charges + late_fees + fuel_charges
    return max(Decimal("0"), deposit_amount - deductions)


@dataclass
class Payment:
    """
    Hecho de pago afirmado por un colaborador externo.

    El libro no captura fondos: solo registra montos, estados y el
    reembolso de depósitos.
    """

    # Identificadores
    id: int | None = None
    booking_id: int = 0
    payer_id: str | None = None

    payment_type: PaymentType = PaymentType.RENTAL
    payment_method: PaymentMethod | None = None

    # Monto
    amount: Decimal = Decimal("0")

    # Estado
    status: PaymentStatus = PaymentStatus.PENDING

    # Depósito
    is_deposit: bool = False
    deposit_refunded: bool = False
    deposit_refund_amount: Decimal | None = None
    deposit_refunded_at: datetime | None = None

    # Referencias externas
    reference_number: str | None = None
    transaction_id: str | None = None
    admin_notes: str | None = None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID

    @property
    def is_final(self) -> bool:
        """Verifica si el pago ya no puede cambiar de estado."""
        return self.status in (PaymentStatus.FAILED, PaymentStatus.REFUNDED)

    @property
    def can_refund_deposit(self) -> bool:
        return self.is_deposit and self.is_paid and not self.deposit_refunded

    # === Métodos de negocio ===

    def settle(self, status: PaymentStatus, at: datetime) -> PaymentStatus:
        """
        Cambia el estado del pago.

        Transiciones válidas: pending -> paid | failed, paid -> refunded.
        """
        allowed_from = SETTLEMENT_TRANSITIONS.get(status, frozenset())
        if self.status not in allowed_from:
            raise InvalidPaymentStatusError(
                current_status=self.status.value,
                attempted=f"mark {status.value}",
                allowed_from=sorted(s.value for s in allowed_from),
            )
        previous = self.status
        self.status = status
        self.updated_at = at
        return previous

    def refund_deposit(self, amount: Decimal, at: datetime) -> None:
        """Registra la devolución (total o parcial) del depósito."""
        if not self.is_deposit:
            raise ValidationError("payment_id", "el pago no es un depósito")
        if self.deposit_refunded:
            raise InvalidPaymentStatusError(
                current_status="deposit_refunded",
                attempted="refund deposit",
                allowed_from=[PaymentStatus.PAID.value],
            )
        if not self.is_paid:
            raise InvalidPaymentStatusError(
                current_status=self.status.value,
                attempted="refund deposit",
                allowed_from=[PaymentStatus.PAID.value],
            )
        if amount <= 0 or amount > self.amount:
            raise ValidationError(
                "amount", f"el reembolso debe estar entre 0 y {self.amount}"
            )
        self.deposit_refunded = True
        self.deposit_refund_amount = amount
        self.deposit_refunded_at = at
        self.updated_at = at

    @classmethod
    def create_pending(
        cls,
        booking_id: int,
        payment_type: PaymentType,
        amount: Decimal,
        created_at: datetime,
        is_deposit: bool = False,
        payer_id: str | None = None,
        payment_method: PaymentMethod | None = None,
        reference_number: str | None = None,
        transaction_id: str | None = None,
    ) -> "Payment":
        """Factory para registrar un pago pendiente."""
        if amount <= 0:
            raise ValidationError("amount", "debe ser mayor que cero")
        return cls(
            booking_id=booking_id,
            payer_id=payer_id,
            payment_type=payment_type,
            payment_method=payment_method,
            amount=amount,
            status=PaymentStatus.PENDING,
            is_deposit=is_deposit or payment_type == PaymentType.DEPOSIT,
            reference_number=reference_number,
            transaction_id=transaction_id,
            created_at=created_at,
            updated_at=created_at,
        )
