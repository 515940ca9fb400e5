"""Value Object DatetimeRange - intervalo semiabierto [pickup, return)."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from app.domain.errors import InvalidDateRangeError

SECONDS_PER_DAY = 86400


def ensure_utc(value: datetime) -> datetime:
    """Normaliza un datetime a UTC; los valores naive se asumen en UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def count_rental_days(start: datetime, end: datetime) -> int:
    """
    Calcula los días cobrables entre dos instantes.

    Regla de negocio: cualquier fracción de día cuenta como día completo,
    y un intervalo vacío o negativo se cobra como 1 día.
    Ejemplo: 25 horas = 2 días.
    """
    seconds = (end - start).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


@dataclass(frozen=True)
class DatetimeRange:
    """
    Value Object inmutable que representa el intervalo de una reserva.

    El intervalo es semiabierto: incluye start y excluye end, de modo que
    una devolución y una recogida en el mismo instante no se superponen.

    Attributes:
        start: Fecha/hora de recogida (pickup).
        end: Fecha/hora de devolución (return).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidDateRangeError(self.start, self.end)

    @property
    def duration(self) -> timedelta:
        """Retorna la duración del rango."""
        return self.end - self.start

    @property
    def rental_days(self) -> int:
        """Días cobrables del rango (mínimo 1)."""
        return count_rental_days(self.start, self.end)

    def overlaps_with(self, other: "DatetimeRange") -> bool:
        """Verifica si este rango se superpone con otro."""
        return self.start < other.end and self.end > other.start

    def calendar_days(self) -> Iterator[date]:
        """Itera las fechas de calendario de cada día cobrable."""
        for offset in range(self.rental_days):
            yield (self.start + timedelta(days=offset)).date()

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def from_datetimes(cls, pickup: datetime, return_date: datetime) -> "DatetimeRange":
        """Factory que normaliza ambos extremos a UTC."""
        return cls(start=ensure_utc(pickup), end=ensure_utc(return_date))
