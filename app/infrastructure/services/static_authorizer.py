"""Autorizador basado en una lista fija de actores administrativos."""

from typing import Iterable

from app.application.interfaces.authorizer import Authorizer


class StaticAuthorizer(Authorizer):
    """
    Implementación del Authorizer a partir de configuración.

    Los identificadores privilegiados se leen de PRIVILEGED_ACTOR_IDS.
    Un actor anónimo nunca es privilegiado.
    """

    def __init__(self, privileged_actor_ids: Iterable[str] = ()) -> None:
        self._privileged = frozenset(a.strip() for a in privileged_actor_ids if a and a.strip())

    def is_privileged(self, actor_id: str | None) -> bool:
        if not actor_id:
            return False
        return actor_id.strip() in self._privileged
