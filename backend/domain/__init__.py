"""
FX Trader – Domain Layer
==========================
Núcleo puro del sistema.

Este módulo contiene:
- entities/: Entidades de negocio (Position, Account, Candle, WalletTransaction)
- value_objects/: Objetos inmutables (InstrumentSpec, timeframes)
- services/: Servicios de dominio puros (PositionEvaluator, fórmulas PnL/margen)
- repositories/: Interfaces abstractas (ABCs) y Unit of Work
- events/: Eventos de dominio
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (SQLAlchemy, FastAPI, etc.)
"""

from backend.domain.entities.position import Position, PositionSide, PositionStatus
from backend.domain.entities.candle import Candle
from backend.domain.entities.account import Account
from backend.domain.value_objects.instrument import InstrumentSpec

__all__ = [
    "Position",
    "PositionSide",
    "PositionStatus",
    "Candle",
    "Account",
    "InstrumentSpec",
]
