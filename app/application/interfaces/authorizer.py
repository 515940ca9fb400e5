"""Interface Authorizer - Puerto para decidir si un actor es privilegiado."""

from abc import ABC, abstractmethod


class Authorizer(ABC):
    """
    Capacidad única de autorización inyectada en los servicios.

    El proveedor de identidad es externo; el núcleo solo necesita saber
    si el actor puede ejecutar operaciones administrativas.
    """

    @abstractmethod
    def is_privileged(self, actor_id: str | None) -> bool:
        """
        Indica si el actor tiene rol administrativo.

        Args:
            actor_id: Identificador del actor (puede ser None si es anónimo).

        Returns:
            True si el actor puede aprobar, rechazar o revisar.
        """
        raise NotImplementedError
