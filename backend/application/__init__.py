"""
FX Trader – Application Layer
================================
Casos de uso, estado de simulación y orquestación.

Este módulo contiene:
- state/: Estado de mercado inyectable (precios + series de velas)
- services/: Generador, agregador, locks y liquidación
- use_cases/: Tick loop, trading, cuentas y billetera
- ports/: Interfaces hacia infraestructura
- dto/: Comandos y resultados

REGLA DE DEPENDENCIA:
Esta capa puede importar de domain/ y de sus propios ports/.
NO puede importar de infrastructure/ ni de presentation/.
"""

from backend.application.use_cases.process_tick_usecase import (
    ProcessTickUseCase,
    ProcessTickResult,
)
from backend.application.use_cases.trading_usecase import TradingUseCase

__all__ = [
    "ProcessTickUseCase",
    "ProcessTickResult",
    "TradingUseCase",
]
