"""Interface Clock - Puerto para abstracción de tiempo."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """
    Fuente de "ahora" para vencimientos de reservas y extensiones.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def now(self) -> datetime:
        """
        Retorna la fecha/hora actual.

        Returns:
            datetime timezone-aware en UTC.
        """
        raise NotImplementedError


class SystemClock(Clock):
    """Implementación real que usa el reloj del sistema."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """
    Reloj fijo para testing.

    Los valores naive se interpretan en UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = self._as_utc(fixed_time or datetime.now(timezone.utc))

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        """
        Cambia el tiempo fijo.

        Args:
            new_time: Nuevo tiempo a fijar.
        """
        self._fixed_time = self._as_utc(new_time)

    def advance(self, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        """
        Avanza el tiempo fijo.

        Args:
            minutes: Minutos a avanzar.
            hours: Horas a avanzar.
            days: Días a avanzar.
        """
        self._fixed_time = self._fixed_time + timedelta(minutes=minutes, hours=hours, days=days)
