"""Entidades del dominio de reservas de vehículos."""

from app.domain.entities.booking import (
    Booking,
    BookingAction,
    BookingPaymentStatus,
    BookingStatus,
)
from app.domain.entities.extension import Extension, ExtensionDecision, ExtensionStatus
from app.domain.entities.late_fee import LateFee, LateFeePaymentStatus
from app.domain.entities.payment import Payment, PaymentMethod, PaymentStatus, PaymentType
from app.domain.entities.peak_season_rule import PeakPricingType, PeakSeasonRule
from app.domain.entities.vehicle import Vehicle

__all__ = [
    # Booking
    "Booking",
    "BookingAction",
    "BookingStatus",
    "BookingPaymentStatus",
    # Extension
    "Extension",
    "ExtensionDecision",
    "ExtensionStatus",
    # LateFee
    "LateFee",
    "LateFeePaymentStatus",
    # Payment
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentType",
    # PeakSeasonRule
    "PeakSeasonRule",
    "PeakPricingType",
    # Vehicle
    "Vehicle",
]
