"""Entidad LateFee - cargo por devolución tardía."""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import ValidationError

SECONDS_PER_HOUR = 3600


class LateFeePaymentStatus(str, Enum):
    """Estados de pago de un cargo por retraso."""

    PENDING = "pending"
    PAID = "paid"
    WAIVED = "waived"


def count_overdue_hours(return_date: datetime, until: datetime) -> int:
    """
    Horas completas de retraso, con un mínimo de 1 una vez que existe retraso.

    Ejemplo: devolución a las 10:00, ahora 14:30 -> 4 horas.
    """
    seconds = (until - return_date).total_seconds()
    return max(1, math.floor(seconds / SECONDS_PER_HOUR))


@dataclass
class LateFee:
    """
    Cargo derivado de las horas transcurridas desde la fecha de devolución acordada.

    Invariante: a lo sumo un LateFee por reserva.
    """

    id: int | None = None
    booking_id: int = 0

    original_return_date: datetime | None = None
    actual_return_date: datetime | None = None

    hours_overdue: int = 0
    hourly_rate: Decimal = Decimal("0")
    total_late_fee: Decimal = Decimal("0")

    payment_status: LateFeePaymentStatus = LateFeePaymentStatus.PENDING
    paid_amount: Decimal = Decimal("0")

    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def is_settled(self) -> bool:
        """Un cargo pagado o condonado ya no bloquea el cierre de la reserva."""
        return self.payment_status != LateFeePaymentStatus.PENDING

    @property
    def is_closed(self) -> bool:
        """El cargo queda cerrado cuando se registra la devolución real."""
        return self.actual_return_date is not None

    @property
    def outstanding(self) -> Decimal:
        return max(Decimal("0"), self.total_late_fee - self.paid_amount)

    # === Métodos de negocio ===

    def recompute(self, until: datetime, at: datetime) -> None:
        """Recalcula horas y total hasta el instante indicado."""
        self.hours_overdue = count_overdue_hours(self.original_return_date, until)
        self.total_late_fee = (self.hourly_rate * self.hours_overdue).quantize(Decimal("0.01"))
        self._sync_payment_status()
        self.updated_at = at

    def close(self, actual_return_date: datetime, at: datetime) -> None:
        """Registra la devolución real y fija el total definitivo."""
        if actual_return_date <= self.original_return_date:
            raise ValidationError(
                "actual_return_date", "debe ser posterior a la fecha de devolución acordada"
            )
        self.actual_return_date = actual_return_date
        self.recompute(actual_return_date, at)

    def register_payment(self, amount: Decimal, at: datetime) -> None:
        """Suma un pago; el cargo queda pagado cuando se cubre el total."""
        self.set_paid_amount(self.paid_amount + amount, at)

    def set_paid_amount(self, amount: Decimal, at: datetime) -> None:
        """Fija el monto pagado y vuelve a derivar el estado de pago."""
        self.paid_amount = Decimal(amount)
        self._sync_payment_status()
        self.updated_at = at

    def _sync_payment_status(self) -> None:
        """
        Pagado mientras lo abonado cubra el total vigente.

        Un cargo condonado conserva su estado aunque el total cambie.
        """
        if self.payment_status == LateFeePaymentStatus.WAIVED:
            return
        if self.total_late_fee > 0 and self.paid_amount >= self.total_late_fee:
            self.payment_status = LateFeePaymentStatus.PAID
        else:
            self.payment_status = LateFeePaymentStatus.PENDING

    @classmethod
    def compute(
        cls,
        booking_id: int,
        original_return_date: datetime,
        now: datetime,
        hourly_rate: Decimal,
    ) -> "LateFee":
        """Factory que calcula el cargo para una reserva vencida."""
        fee = cls(
            booking_id=booking_id,
            original_return_date=original_return_date,
            hourly_rate=hourly_rate,
            payment_status=LateFeePaymentStatus.PENDING,
            created_at=now,
        )
        fee.recompute(now, now)
        return fee
