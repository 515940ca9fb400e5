"""Value Object PriceBreakdown - desglose del precio de un intervalo."""

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class RateTier(str, Enum):
    """Tarifa base efectivamente aplicada al intervalo."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class PriceBreakdown:
    """
    Desglose inmutable producido por el PricingEngine.

    Attributes:
        days: Días cobrables (mínimo 1).
        daily_rate: Tarifa diaria base del vehículo.
        subtotal: days × daily_rate, sin descuentos ni recargos.
        discount: Descuento por tarifa semanal/mensual sobre el subtotal.
        peak_surcharge: Recargo acumulado por temporada alta.
        applied_multiplier: Mayor multiplicador de temporada aplicado (1.0 si ninguno).
        rate_tier: Tarifa base aplicada (daily, weekly o monthly).
        total: subtotal - discount + peak_surcharge, redondeado a 2 decimales.
    """

    days: int
    daily_rate: Decimal
    subtotal: Decimal
    discount: Decimal
    peak_surcharge: Decimal
    applied_multiplier: Decimal
    rate_tier: RateTier
    total: Decimal

    @property
    def has_peak_pricing(self) -> bool:
        return self.peak_surcharge > 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["rate_tier"] = self.rate_tier.value
        return data
