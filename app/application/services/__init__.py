"""Componentes del núcleo de reservas."""

from app.application.services.availability_checker import AvailabilityChecker, AvailabilityResult
from app.application.services.booking_lifecycle import BookingLifecycle
from app.application.services.extension_workflow import ExtensionWorkflow
from app.application.services.late_fee_calculator import LateFeeCalculator, SweepResult
from app.application.services.payment_ledger import PaymentLedger

__all__ = [
    "AvailabilityChecker",
    "AvailabilityResult",
    "BookingLifecycle",
    "ExtensionWorkflow",
    "LateFeeCalculator",
    "SweepResult",
    "PaymentLedger",
]
