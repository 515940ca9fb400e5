"""Entidad Vehicle - vehículo de la flota (solo lectura para el núcleo)."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class Vehicle:
    """
    Vehículo reservable.

    La flota es administrada externamente; el núcleo de reservas solo lee
    las tarifas, la bandera de disponibilidad y las ubicaciones permitidas.
    """

    id: int | None = None
    name: str = ""

    # Tarifas (weekly/monthly opcionales: se derivan de la diaria si faltan)
    daily_rate: Decimal = Decimal("0")
    weekly_rate: Decimal | None = None
    monthly_rate: Decimal | None = None

    available: bool = True
    locations: list[str] = field(default_factory=list)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def restricts_locations(self) -> bool:
        """Una lista vacía significa que se permite cualquier ubicación."""
        return bool(self.locations)

    # === Métodos de negocio ===

    def allows_pickup_at(self, location: str | None) -> bool:
        """Verifica si el vehículo puede recogerse en la ubicación indicada."""
        if location is None or not self.restricts_locations:
            return True
        return location in self.locations
