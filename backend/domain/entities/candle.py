"""
FX Trader – Domain Entity: Candle
===================================
Vela OHLC de un periodo alineado al timeframe.

Decisiones de diseño:
- Mutable solo mientras su periodo está activo: el agregador actualiza
  high/low/close in-place con cada tick del mismo periodo.
- En cuanto empieza un periodo posterior, la vela deja de tocarse
  (historial append-only). `open` nunca cambia tras la creación.
- Se usa dataclass por rendimiento (más ligera que Pydantic para hot-path).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Candle:
    """Vela OHLC con inicio de periodo en epoch segundos."""

    period_start: int    # múltiplo exacto de la duración del timeframe
    open: float
    high: float
    low: float
    close: float

    @classmethod
    def open_at(cls, period_start: int, price: float) -> "Candle":
        """Nueva vela de un solo tick: open = high = low = close."""
        return cls(
            period_start=period_start,
            open=price,
            high=price,
            low=price,
            close=price,
        )

    def update(self, price: float) -> None:
        """Actualizar high/low/close con un tick del mismo periodo."""
        self.high = max(self.high, price)
        self.low = min(self.low, price)
        self.close = price

    def to_dict(self) -> dict:
        """Serialización para WebSocket / frontend."""
        return {
            "time": self.period_start,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
