"""Entidad PeakSeasonRule - recargo de temporada alta por rango de fechas."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from app.domain.errors import ValidationError


class PeakPricingType(str, Enum):
    """Forma de aplicar el recargo."""

    MULTIPLIER = "multiplier"
    FIXED = "fixed"


@dataclass
class PeakSeasonRule:
    """
    Regla de temporada alta.

    El rango [start_date, end_date] es inclusivo en días de calendario.
    Las reglas se administran externamente; el núcleo solo lee las activas.
    """

    id: int | None = None
    name: str = ""
    start_date: date | None = None
    end_date: date | None = None

    pricing_type: PeakPricingType = PeakPricingType.MULTIPLIER
    price_multiplier: Decimal = Decimal("1.0")
    fixed_increase: Decimal = Decimal("0")

    is_active: bool = True
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("end_date", "debe ser igual o posterior a start_date")
        if self.price_multiplier < 1:
            raise ValidationError("price_multiplier", "debe ser mayor o igual a 1.0")
        if self.fixed_increase < 0:
            raise ValidationError("fixed_increase", "no puede ser negativo")

    # === Métodos de negocio ===

    def covers(self, day: date) -> bool:
        """Verifica si la regla aplica al día indicado (extremos incluidos)."""
        return self.is_active and self.start_date <= day <= self.end_date

    def surcharge_for(self, daily_rate: Decimal) -> Decimal:
        """Recargo que la regla agrega a un día con la tarifa indicada."""
        if self.pricing_type == PeakPricingType.FIXED:
            return self.fixed_increase
        if self.price_multiplier > 1:
            return daily_rate * (self.price_multiplier - 1)
        return Decimal("0")

    @property
    def sort_key(self) -> tuple[date, int]:
        """Precedencia entre reglas superpuestas: la de inicio más temprano gana."""
        return self.start_date, self.id or 0
