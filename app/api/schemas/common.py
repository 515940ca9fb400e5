from datetime import datetime, timezone
from decimal import Decimal

from pydantic import condecimal

PositiveMoney = condecimal(gt=0, max_digits=12, decimal_places=2)
NonNegativeMoney = condecimal(ge=0, max_digits=12, decimal_places=2)

DECIMAL_ENCODERS = {Decimal: lambda v: format(v, ".2f")}


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
