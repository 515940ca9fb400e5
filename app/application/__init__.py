"""
Capa de Aplicación - Núcleo de reservas de vehículos.

Esta capa orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- services/: Componentes del núcleo (disponibilidad, ciclo de vida, extensiones,
  cargos por retraso, libro de pagos)
- use_cases/: Consultas compuestas expuestas a la API
- interfaces/: Puertos (contratos para adaptadores)
"""
