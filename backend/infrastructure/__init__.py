"""
FX Trader – Infrastructure Layer
===================================
Implementaciones concretas de interfaces.

Este módulo contiene:
- persistence/: Base de datos (SQLite / MySQL async), modelos ORM,
  mappers, repositorios y unidad de trabajo

REGLA DE DEPENDENCIA:
Esta capa implementa interfaces definidas en:
- domain/repositories/

Puede importar de:
- domain/ (entidades, interfaces)
- shared/ (config, logging)
"""
