"""Implementaciones in-memory para testing y modo demo."""

from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.extension_repo import InMemoryExtensionRepo
from app.infrastructure.in_memory.late_fee_repo import InMemoryLateFeeRepo
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.peak_season_repo import InMemoryPeakSeasonRepo
from app.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager
from app.infrastructure.in_memory.vehicle_repo import InMemoryVehicleRepo

__all__ = [
    # Repositories
    "InMemoryBookingRepo",
    "InMemoryExtensionRepo",
    "InMemoryLateFeeRepo",
    "InMemoryPaymentRepo",
    "InMemoryPeakSeasonRepo",
    "InMemoryVehicleRepo",
    # Infrastructure
    "InMemoryTransactionManager",
]
