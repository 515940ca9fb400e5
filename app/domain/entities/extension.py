"""Entidad Extension - solicitud para extender la devolución de una reserva."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import InvalidExtensionStatusError


class ExtensionStatus(str, Enum):
    """Estados posibles de una extensión."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExtensionDecision(str, Enum):
    """Decisiones que un revisor puede tomar."""

    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class Extension:
    """
    Solicitud de extensión de una reserva activa.

    Máquina de estados: pending -> approved | rejected (ambos terminales).
    A lo sumo puede existir una extensión pendiente por reserva.
    """

    id: int | None = None
    booking_id: int = 0
    requester_id: str = ""

    # Solicitud
    original_return_date: datetime | None = None
    new_return_date: datetime | None = None
    requested_extension_days: int = 0
    extension_fee: Decimal = Decimal("0")

    status: ExtensionStatus = ExtensionStatus.PENDING

    # Revisión
    admin_notes: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def is_pending(self) -> bool:
        return self.status == ExtensionStatus.PENDING

    # === Métodos de negocio ===

    def _review(
        self,
        target: ExtensionStatus,
        attempted: str,
        reviewer_id: str,
        at: datetime,
        notes: str | None,
    ) -> None:
        if not self.is_pending:
            raise InvalidExtensionStatusError(
                current_status=self.status.value,
                attempted=attempted,
                allowed_from=[ExtensionStatus.PENDING.value],
            )
        self.status = target
        self.reviewed_by = reviewer_id
        self.reviewed_at = at
        self.updated_at = at
        if notes is not None:
            self.admin_notes = notes

    def approve(self, reviewer_id: str, at: datetime, notes: str | None = None) -> None:
        """Aprueba la extensión."""
        self._review(ExtensionStatus.APPROVED, "approve", reviewer_id, at, notes)

    def reject(self, reviewer_id: str, at: datetime, notes: str | None = None) -> None:
        """Rechaza la extensión."""
        self._review(ExtensionStatus.REJECTED, "reject", reviewer_id, at, notes)

    @classmethod
    def create_pending(
        cls,
        booking_id: int,
        requester_id: str,
        original_return_date: datetime,
        new_return_date: datetime,
        requested_extension_days: int,
        extension_fee: Decimal,
        created_at: datetime,
    ) -> "Extension":
        """Factory para crear una extensión pendiente de revisión."""
        return cls(
            booking_id=booking_id,
            requester_id=requester_id,
            original_return_date=original_return_date,
            new_return_date=new_return_date,
            requested_extension_days=requested_extension_days,
            extension_fee=extension_fee,
            status=ExtensionStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
        )
