"""
FX Trader – Domain Service: PnL & Margin
==========================================
Fórmulas únicas de PnL realizado y margen requerido.

El evaluador TP/SL y el cierre manual usan EXACTAMENTE la misma
función para evitar contabilidad divergente.

FÓRMULAS:
  BUY:   pnl = (close - entry) × size
  SELL:  pnl = (entry - close) × size

  margen = size × entry / leverage        (leverage 1:100)

  Ejemplo: BUY 1 EUR/USD entry=1.1000 close=1.1050 → pnl = +0.0050
  Ejemplo: SELL 0.5 GOLD entry=2000 close=2010   → pnl = -5.0
"""

from __future__ import annotations

from backend.domain.entities.position import PositionSide

DEFAULT_LEVERAGE = 100.0


def realized_pnl(
    side: PositionSide,
    entry_price: float,
    close_price: float,
    size: float,
) -> float:
    """PnL realizado en unidades monetarias."""
    if PositionSide(side) == PositionSide.BUY:
        return (close_price - entry_price) * size
    return (entry_price - close_price) * size


def required_margin(
    size: float,
    entry_price: float,
    leverage: float = DEFAULT_LEVERAGE,
) -> float:
    """Colateral necesario para abrir la posición."""
    return (size * entry_price) / leverage
