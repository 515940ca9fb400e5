"""Servicios de dominio puros."""

from app.domain.services.pricing_engine import PricingEngine

__all__ = ["PricingEngine"]
