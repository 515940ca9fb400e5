"""Value Objects del dominio de reservas."""

from app.domain.value_objects.booking_reference import BookingReference
from app.domain.value_objects.datetime_range import DatetimeRange
from app.domain.value_objects.price_breakdown import PriceBreakdown, RateTier

__all__ = [
    "BookingReference",
    "DatetimeRange",
    "PriceBreakdown",
    "RateTier",
]
