"""
Capa de Dominio - Núcleo de reservas de vehículos.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects, servicios de dominio y excepciones.

Estructura:
- entities/: Entidades del dominio (Booking, Extension, LateFee, Payment, etc.)
- value_objects/: Objetos de valor inmutables (DatetimeRange, PriceBreakdown, etc.)
- services/: Servicios de dominio puros (PricingEngine)
- errors.py: Excepciones específicas del dominio
"""
