"""Value Object BookingReference - referencia legible de una reserva."""

import secrets
import string
from dataclasses import dataclass
from datetime import datetime

BASE36_CHARS = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_CHARS[remainder])
    return "".join(reversed(digits))


@dataclass(frozen=True)
class BookingReference:
    """
    Value Object inmutable con la referencia pública de una reserva.

    Formato: BR-<timestamp en milisegundos, base 36>-<4 caracteres aleatorios>
    (ej: BR-LRX3K2A1-7QZP).
    """

    value: str

    PREFIX = "BR"
    SUFFIX_LENGTH = 4

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("booking_reference no puede estar vacío")

        if len(self.value) > 50:
            raise ValueError(f"booking_reference excede 50 caracteres: {len(self.value)}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls, now: datetime) -> "BookingReference":
        """Genera una referencia a partir del instante de creación."""
        stamp = _to_base36(int(now.timestamp() * 1000))
        suffix = "".join(secrets.choice(BASE36_CHARS) for _ in range(cls.SUFFIX_LENGTH))
        return cls(value=f"{cls.PREFIX}-{stamp}-{suffix}")
