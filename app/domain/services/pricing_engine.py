"""
PricingEngine - convierte (tarifa base, intervalo, reglas de temporada) en un desglose.

Orden de aplicación:
1. La tarifa base se cobra por bloques: meses completos de 30 días, luego
   semanas completas de 7 días sobre el resto, y los días sueltos a tarifa
   diaria. Un bloque nunca cuesta más que sus días a tarifa diaria.
2. El cargo base nunca supera el de una renta más larga (hasta el siguiente
   bloque mensual), de modo que el precio es monótono en la fecha de devolución.
3. El recargo de temporada alta se calcula día por día sobre la tarifa diaria
   y se suma encima del cargo base: un día pico dentro de una semana con
   descuento conserva su recargo.
"""

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from app.domain.entities.peak_season_rule import PeakPricingType, PeakSeasonRule
from app.domain.value_objects.datetime_range import count_rental_days, ensure_utc
from app.domain.value_objects.price_breakdown import PriceBreakdown, RateTier

TWO_PLACES = Decimal("0.01")
ONE = Decimal("1.0")


def _money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def first_matching_rule(day: date, ordered_rules: Sequence[PeakSeasonRule]) -> PeakSeasonRule | None:
    """Primera regla activa que cubre el día, en el orden recibido."""
    for rule in ordered_rules:
        if rule.covers(day):
            return rule
    return None


def order_rules(rules: Iterable[PeakSeasonRule]) -> list[PeakSeasonRule]:
    """Reglas activas ordenadas por (start_date, id)."""
    return sorted((rule for rule in rules if rule.is_active), key=lambda rule: rule.sort_key)


class PricingEngine:
    WEEK_DAYS = 7
    MONTH_DAYS = 30

    def __init__(
        self,
        weekly_discount_factor: Decimal = Decimal("0.9"),
        monthly_discount_factor: Decimal = Decimal("0.8"),
    ) -> None:
        self._weekly_factor = Decimal(weekly_discount_factor)
        self._monthly_factor = Decimal(monthly_discount_factor)

    def weekly_rate_for(self, daily_rate: Decimal, weekly_rate: Decimal | None = None) -> Decimal:
        if weekly_rate is not None:
            return Decimal(weekly_rate)
        return daily_rate * self.WEEK_DAYS * self._weekly_factor

    def monthly_rate_for(self, daily_rate: Decimal, monthly_rate: Decimal | None = None) -> Decimal:
        if monthly_rate is not None:
            return Decimal(monthly_rate)
        return daily_rate * self.MONTH_DAYS * self._monthly_factor

    def price(
        self,
        daily_rate: Decimal,
        pickup: datetime,
        return_date: datetime,
        peak_rules: Iterable[PeakSeasonRule] = (),
        weekly_rate: Decimal | None = None,
        monthly_rate: Decimal | None = None,
    ) -> PriceBreakdown:
        daily_rate = Decimal(daily_rate)
        pickup = ensure_utc(pickup)
        days = count_rental_days(pickup, ensure_utc(return_date))

        weekly = self.weekly_rate_for(daily_rate, weekly_rate)
        monthly = self.monthly_rate_for(daily_rate, monthly_rate)
        base, tier = self._best_base(days, daily_rate, weekly, monthly)

        surcharge, multiplier = self._peak_surcharge(daily_rate, pickup, days, order_rules(peak_rules))

        subtotal = _money(daily_rate * days)
        discount = _money(daily_rate * days - base)
        peak_surcharge = _money(surcharge)
        return PriceBreakdown(
            days=days,
            daily_rate=_money(daily_rate),
            subtotal=subtotal,
            discount=discount,
            peak_surcharge=peak_surcharge,
            applied_multiplier=multiplier,
            rate_tier=tier,
            total=subtotal - discount + peak_surcharge,
        )

    def _tiered_base(
        self, days: int, daily_rate: Decimal, weekly: Decimal, monthly: Decimal
    ) -> tuple[Decimal, RateTier]:
        months, remainder = divmod(days, self.MONTH_DAYS)
        weeks, remainder = divmod(remainder, self.WEEK_DAYS)

        month_block = min(monthly, daily_rate * self.MONTH_DAYS)
        week_block = min(weekly, daily_rate * self.WEEK_DAYS)
        base = months * month_block + weeks * week_block + remainder * daily_rate

        if months:
            return base, RateTier.MONTHLY
        if weeks:
            return base, RateTier.WEEKLY
        return base, RateTier.DAILY

    def _best_base(
        self, days: int, daily_rate: Decimal, weekly: Decimal, monthly: Decimal
    ) -> tuple[Decimal, RateTier]:
        # tiered(d + 30) == tiered(d) + month block, so a 30-day window covers every longer rental
        candidates = (
            self._tiered_base(candidate, daily_rate, weekly, monthly)
            for candidate in range(days, days + self.MONTH_DAYS)
        )
        best_base, best_tier = self._tiered_base(days, daily_rate, weekly, monthly)
        for base, tier in candidates:
            if base < best_base:
                best_base, best_tier = base, tier
        return best_base, best_tier

    def _peak_surcharge(
        self,
        daily_rate: Decimal,
        pickup: datetime,
        days: int,
        ordered_rules: Sequence[PeakSeasonRule],
    ) -> tuple[Decimal, Decimal]:
        surcharge = Decimal("0")
        applied_multiplier = ONE
        if not ordered_rules:
            return surcharge, applied_multiplier

        for offset in range(days):
            day = (pickup + timedelta(days=offset)).date()
            rule = first_matching_rule(day, ordered_rules)
            if rule is None:
                continue
            surcharge += rule.surcharge_for(daily_rate)
            if rule.pricing_type == PeakPricingType.MULTIPLIER:
                applied_multiplier = max(applied_multiplier, Decimal(rule.price_multiplier))
        return surcharge, applied_multiplier
