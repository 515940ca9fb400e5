"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.extension_repo import ExtensionRepo
from app.application.interfaces.late_fee_repo import LateFeeRepo
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.vehicle_repo import VehicleRepo

__all__ = [
    # Repositories
    "BookingRepo",
    "ExtensionRepo",
    "LateFeeRepo",
    "PaymentRepo",
    "PeakSeasonRepo",
    "VehicleRepo",
    # Infrastructure
    "TransactionManager",
    # Collaborators
    "Authorizer",
    "Clock",
    "SystemClock",
    "FakeClock",
]
