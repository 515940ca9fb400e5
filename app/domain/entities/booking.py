"""Entidad Booking - Agregado raíz del núcleo de reservas."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import InvalidBookingStatusError, ValidationError
from app.domain.value_objects.datetime_range import DatetimeRange


class BookingStatus(str, Enum):
    """Estados posibles de una reserva."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class BookingPaymentStatus(str, Enum):
    """Estado de pago agregado de la reserva."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class BookingAction(str, Enum):
    """Transiciones que se pueden solicitar sobre una reserva."""

    APPROVE = "approve"
    REJECT = "reject"
    BEGIN = "begin"
    COMPLETE = "complete"
    CANCEL = "cancel"


ACTIVE_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.ONGOING}
)
TERMINAL_STATUSES = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.REJECTED, BookingStatus.CANCELLED}
)
# Estados que no bloquean el vehículo
RELEASED_STATUSES = frozenset({BookingStatus.REJECTED, BookingStatus.CANCELLED})
EXTENDABLE_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.ONGOING})

# acción -> (estados de origen permitidos, estado destino)
TRANSITIONS: dict[BookingAction, tuple[frozenset[BookingStatus], BookingStatus]] = {
    BookingAction.APPROVE: (frozenset({BookingStatus.PENDING}), BookingStatus.CONFIRMED),
    BookingAction.REJECT: (frozenset({BookingStatus.PENDING}), BookingStatus.REJECTED),
    BookingAction.BEGIN: (frozenset({BookingStatus.CONFIRMED}), BookingStatus.ONGOING),
    BookingAction.COMPLETE: (frozenset({BookingStatus.ONGOING}), BookingStatus.COMPLETED),
    BookingAction.CANCEL: (EXTENDABLE_STATUSES, BookingStatus.CANCELLED),
}


@dataclass
class Booking:
    """
    Reserva de un vehículo para un intervalo [pickup_date, return_date).

    Solo cambia de estado a través de `apply`; nunca se elimina físicamente,
    únicamente pasa a un estado terminal.
    """

    # Identificadores
    id: int | None = None
    booking_reference: str | None = None

    # Referencias externas
    vehicle_id: int = 0
    requester_id: str = ""

    # Intervalo
    pickup_date: datetime | None = None
    return_date: datetime | None = None
    pickup_location: str | None = None
    dropoff_location: str | None = None

    # Estados
    status: BookingStatus = BookingStatus.PENDING
    payment_status: BookingPaymentStatus = BookingPaymentStatus.PENDING

    # Financieros
    total_price: Decimal = Decimal("0")

    admin_notes: str | None = None

    # Control de concurrencia
    lock_version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def period(self) -> DatetimeRange:
        """Retorna el intervalo de la reserva como Value Object."""
        return DatetimeRange(start=self.pickup_date, end=self.return_date)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_paid(self) -> bool:
        return self.payment_status == BookingPaymentStatus.PAID

    @property
    def can_be_extended(self) -> bool:
        return self.status in EXTENDABLE_STATUSES

    def is_overdue(self, now: datetime) -> bool:
        """Una reserva activa está vencida cuando su fecha de devolución ya pasó."""
        return self.is_active and self.return_date < now

    # === Métodos de negocio ===

    def apply(self, action: BookingAction, at: datetime, notes: str | None = None) -> BookingStatus:
        """
        Aplica una transición de la máquina de estados.

        Raises:
            InvalidBookingStatusError: si el estado actual no permite la acción.
        """
        allowed_from, target = TRANSITIONS[action]
        if self.status not in allowed_from:
            raise InvalidBookingStatusError(
                current_status=self.status.value,
                attempted=action.value,
                allowed_from=sorted(status.value for status in allowed_from),
            )
        previous = self.status
        self.status = target
        if notes is not None:
            self.admin_notes = notes
        self.updated_at = at
        return previous

    def approve(self, at: datetime, notes: str | None = None) -> None:
        self.apply(BookingAction.APPROVE, at, notes)

    def reject(self, at: datetime, notes: str | None = None) -> None:
        self.apply(BookingAction.REJECT, at, notes)

    def begin(self, at: datetime) -> None:
        self.apply(BookingAction.BEGIN, at)

    def complete(self, at: datetime) -> None:
        self.apply(BookingAction.COMPLETE, at)

    def cancel(self, at: datetime, notes: str | None = None) -> None:
        self.apply(BookingAction.CANCEL, at, notes)

    def extend_return_date(self, new_return_date: datetime, fee: Decimal, at: datetime) -> None:
        """Mueve la fecha de devolución hacia adelante y suma el cargo al total."""
        if not self.can_be_extended:
            raise InvalidBookingStatusError(
                current_status=self.status.value,
                attempted="extend",
                allowed_from=sorted(status.value for status in EXTENDABLE_STATUSES),
            )
        if new_return_date <= self.return_date:
            raise ValidationError(
                "new_return_date", "debe ser posterior a la fecha de devolución actual"
            )
        self.return_date = new_return_date
        self.total_price = self.total_price + fee
        self.updated_at = at

    def mark_as_paid(self, at: datetime) -> None:
        """Marca la reserva como pagada."""
        self.payment_status = BookingPaymentStatus.PAID
        self.updated_at = at

    @classmethod
    def create_pending(
        cls,
        vehicle_id: int,
        requester_id: str,
        period: DatetimeRange,
        total_price: Decimal,
        booking_reference: str,
        created_at: datetime,
        pickup_location: str | None = None,
        dropoff_location: str | None = None,
    ) -> "Booking":
        """Factory para crear una reserva pendiente de aprobación."""
        return cls(
            booking_reference=booking_reference,
            vehicle_id=vehicle_id,
            requester_id=requester_id,
            pickup_date=period.start,
            return_date=period.end,
            pickup_location=pickup_location,
            dropoff_location=dropoff_location,
            status=BookingStatus.PENDING,
            payment_status=BookingPaymentStatus.PENDING,
            total_price=total_price,
            created_at=created_at,
            updated_at=created_at,
        )
