"""
Capa de Infraestructura - Reservas de vehículos.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).

Estructura:
- db/: Tablas, engine, repositorios SQL y transacciones con reintento
- in_memory/: Implementaciones in-memory para testing y modo demo
- services/: Servicios de infraestructura (autorización)
"""

# Database
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.extension_repo_sql import ExtensionRepoSQL
from app.infrastructure.db.repositories.late_fee_repo_sql import LateFeeRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.peak_season_repo_sql import PeakSeasonRepoSQL
from app.infrastructure.db.repositories.vehicle_repo_sql import VehicleRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# In-Memory (for testing)
from app.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryExtensionRepo,
    InMemoryLateFeeRepo,
    InMemoryPaymentRepo,
    InMemoryPeakSeasonRepo,
    InMemoryTransactionManager,
    InMemoryVehicleRepo,
)

# Services
from app.infrastructure.services.static_authorizer import StaticAuthorizer

__all__ = [
    # Database - Repositories SQL
    "BookingRepoSQL",
    "ExtensionRepoSQL",
    "LateFeeRepoSQL",
    "PaymentRepoSQL",
    "PeakSeasonRepoSQL",
    "VehicleRepoSQL",
    "SQLAlchemyTransactionManager",
    # In-Memory Implementations
    "InMemoryBookingRepo",
    "InMemoryExtensionRepo",
    "InMemoryLateFeeRepo",
    "InMemoryPaymentRepo",
    "InMemoryPeakSeasonRepo",
    "InMemoryVehicleRepo",
    "InMemoryTransactionManager",
    # Services
    "StaticAuthorizer",
]
