"""Excepciones de dominio para el núcleo de reservaciones de vehículos."""

from typing import Any, Sequence


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


# === Errores de Validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code="VALIDATION_ERROR",
            details={"field": field},
        )
        self.field = field


class InvalidDateRangeError(ValidationError):
    """Rango de fechas inválido (return_date debe ser posterior a pickup_date)."""

    def __init__(self, start: Any, end: Any, field: str = "return_date"):
        super().__init__(field=field, message=f"{end} debe ser posterior a {start}")
        self.code = "INVALID_DATE_RANGE"
        self.details.update({"start": str(start), "end": str(end)})


# === Errores de Recurso no encontrado ===


class NotFoundError(DomainError):
    """El recurso referenciado no existe."""

    def __init__(self, entity: str, identifier: Any, code: str):
        super().__init__(
            message=f"{entity} no encontrado: {identifier}",
            code=code,
            details={"entity": entity, "id": identifier},
        )
        self.entity = entity
        self.identifier = identifier


class VehicleNotFoundError(NotFoundError):
    def __init__(self, vehicle_id: int):
        super().__init__("Vehículo", vehicle_id, "VEHICLE_NOT_FOUND")


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: int):
        super().__init__("Reserva", booking_id, "BOOKING_NOT_FOUND")


class ExtensionNotFoundError(NotFoundError):
    def __init__(self, extension_id: int):
        super().__init__("Extensión", extension_id, "EXTENSION_NOT_FOUND")


class LateFeeNotFoundError(NotFoundError):
    def __init__(self, late_fee_id: int | None = None, booking_id: int | None = None):
        identifier = late_fee_id if late_fee_id is not None else f"reserva {booking_id}"
        super().__init__("Cargo por retraso", identifier, "LATE_FEE_NOT_FOUND")
        self.booking_id = booking_id


class PaymentNotFoundError(NotFoundError):
    def __init__(self, payment_id: int):
        super().__init__("Pago", payment_id, "PAYMENT_NOT_FOUND")


class PeakSeasonRuleNotFoundError(NotFoundError):
    def __init__(self, rule_id: int):
        super().__init__("Regla de temporada alta", rule_id, "PEAK_SEASON_RULE_NOT_FOUND")


# === Errores de Conflicto ===


class ConflictError(DomainError):
    """La operación violaría un invariante de unicidad o de no superposición."""


class BookingConflictError(ConflictError):
    """El vehículo ya está reservado para un intervalo que se superpone."""

    def __init__(self, vehicle_id: int, conflicting_booking_ids: Sequence[int]):
        ids = list(conflicting_booking_ids)
        super().__init__(
            message=f"El vehículo {vehicle_id} ya está reservado en las fechas solicitadas",
            code="BOOKING_CONFLICT",
            details={"vehicle_id": vehicle_id, "conflicting_booking_ids": ids},
        )
        self.vehicle_id = vehicle_id
        self.conflicting_booking_ids = ids


class VehicleUnavailableError(ConflictError):
    """El vehículo está marcado como no disponible por la flota."""

    def __init__(self, vehicle_id: int):
        super().__init__(
            message=f"El vehículo {vehicle_id} no está disponible",
            code="VEHICLE_UNAVAILABLE",
            details={"vehicle_id": vehicle_id},
        )
        self.vehicle_id = vehicle_id


class PendingExtensionExistsError(ConflictError):
    """Ya existe una extensión pendiente para la reserva."""

    def __init__(self, booking_id: int, extension_id: int | None = None):
        super().__init__(
            message=f"La reserva {booking_id} ya tiene una extensión pendiente",
            code="PENDING_EXTENSION_EXISTS",
            details={"booking_id": booking_id, "extension_id": extension_id},
        )
        self.booking_id = booking_id
        self.extension_id = extension_id


class LateFeeAlreadyExistsError(ConflictError):
    """Ya existe un cargo por retraso para la reserva."""

    def __init__(self, booking_id: int, late_fee_id: int | None = None):
        super().__init__(
            message=f"Ya existe un cargo por retraso para la reserva {booking_id}",
            code="LATE_FEE_ALREADY_EXISTS",
            details={"booking_id": booking_id, "late_fee_id": late_fee_id},
        )
        self.booking_id = booking_id
        self.late_fee_id = late_fee_id


class UnsettledLateFeeError(ConflictError):
    """La reserva tiene un cargo por retraso pendiente de pago."""

    def __init__(self, booking_id: int, late_fee_id: int):
        super().__init__(
            message=f"La reserva {booking_id} tiene un cargo por retraso sin liquidar",
            code="UNSETTLED_LATE_FEE",
            details={"booking_id": booking_id, "late_fee_id": late_fee_id},
        )
        self.booking_id = booking_id
        self.late_fee_id = late_fee_id


class OptimisticLockError(ConflictError):
    """Conflicto de concurrencia al actualizar la reserva."""

    def __init__(self, booking_id: int, expected_version: int):
        super().__init__(
            message=f"Conflicto de concurrencia en reserva {booking_id}: "
            f"versión esperada {expected_version}",
            code="OPTIMISTIC_LOCK_ERROR",
            details={"booking_id": booking_id, "expected_version": expected_version},
        )
        self.booking_id = booking_id
        self.expected_version = expected_version


# === Errores de Estado ===


class InvalidStateError(DomainError):
    """El estado actual no permite la transición solicitada."""

    def __init__(
        self,
        entity: str,
        current_status: str,
        attempted: str,
        allowed_from: Sequence[str] = (),
        code: str = "INVALID_STATE",
    ):
        allowed = ", ".join(allowed_from) or "-"
        super().__init__(
            message=f"No se puede {attempted} {entity}: estado actual '{current_status}', "
            f"esperado '{allowed}'",
            code=code,
            details={
                "current_status": current_status,
                "attempted": attempted,
                "allowed_from": list(allowed_from),
            },
        )
        self.current_status = current_status
        self.attempted = attempted
        self.allowed_from = list(allowed_from)


class InvalidBookingStatusError(InvalidStateError):
    def __init__(self, current_status: str, attempted: str, allowed_from: Sequence[str] = ()):
        super().__init__(
            "la reserva", current_status, attempted, allowed_from, "INVALID_BOOKING_STATUS"
        )


class InvalidExtensionStatusError(InvalidStateError):
    def __init__(self, current_status: str, attempted: str, allowed_from: Sequence[str] = ()):
        super().__init__(
            "la extensión", current_status, attempted, allowed_from, "INVALID_EXTENSION_STATUS"
        )


class InvalidPaymentStatusError(InvalidStateError):
    def __init__(self, current_status: str, attempted: str, allowed_from: Sequence[str] = ()):
        super().__init__(
            "el pago", current_status, attempted, allowed_from, "INVALID_PAYMENT_STATUS"
        )


# === Errores de Autorización ===


class PermissionDeniedError(DomainError):
    """El actor no tiene privilegios para la operación."""

    def __init__(self, actor_id: str | None, operation: str):
        super().__init__(
            message=f"El actor '{actor_id}' no tiene permiso para {operation}",
            code="PERMISSION_DENIED",
            details={"actor_id": actor_id, "operation": operation},
        )
        self.actor_id = actor_id
        self.operation = operation
