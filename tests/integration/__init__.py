"""
Integration tests package.

Tests de integración que verifican el funcionamiento correcto de:
- Repositorios SQL sobre SQLite in-memory (aiosqlite)
- Restricciones de base de datos (cargo único, extensión pendiente única)
- Reintento ante fallas de serialización
- Health checks

Para ejecutar solo tests de integración:
    pytest tests/integration/
"""
