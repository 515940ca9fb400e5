"""Servicios de infraestructura."""

from app.infrastructure.services.static_authorizer import StaticAuthorizer

__all__ = [
    "StaticAuthorizer",
]
