"""
FX Trader – Candle Aggregator
===============================
Mantiene, por instrumento y por timeframe, una ventana acotada de velas
OHLC derivadas del stream de precios.

ALGORITMO (por cada timeframe, en CADA tick):
  1. period_start = floor(now / tf) × tf
  2. Serie vacía o última vela de un periodo anterior
         → append Candle(open=high=low=close=price)
  3. Tick dentro del periodo de la última vela
         → high = max(high, price), low = min(low, price), close = price
           (open no cambia)
  4. deque(maxlen=N) descarta la vela más antigua al exceder el límite.

Sin saltos ni coalescencia: un tick actualiza TODAS las series del
instrumento en el mismo tick.

COMPLEJIDAD: O(T) por tick e instrumento, T = número de timeframes.
"""

from __future__ import annotations

from typing import Deque

from backend.application.state.market_state import MarketStateManager
from backend.domain.entities.candle import Candle
from backend.domain.value_objects.timeframe import align_period_start
from backend.shared.logging.logger import get_logger

logger = get_logger("candle_aggregator")


class CandleAggregator:
    """
    Agrega precios en velas de múltiples timeframes.

    Uso:
        aggregator = CandleAggregator()
        aggregator.on_price(state, "EUR/USD", 1.0855, now=time.time())
    """

    def on_tick(
        self,
        series: Deque[Candle],
        timeframe_seconds: int,
        price: float,
        now: float,
    ) -> Deque[Candle]:
        """Aplicar un precio a UNA serie. Retorna la misma serie actualizada."""
        period_start = align_period_start(now, timeframe_seconds)
        last = series[-1] if series else None

        if last is None or last.period_start < period_start:
            # Cruce de periodo → nueva vela; deque(maxlen) expulsa la más vieja
            series.append(Candle.open_at(period_start, price))
            if last is not None:
                logger.debug(
                    "Vela %ds cerrada t=%d O=%.5f H=%.5f L=%.5f C=%.5f",
                    timeframe_seconds, last.period_start,
                    last.open, last.high, last.low, last.close,
                )
        else:
            last.update(price)

        return series

    def on_price(
        self,
        state: MarketStateManager,
        instrument: str,
        price: float,
        now: float,
    ) -> None:
        """Aplicar un precio a todas las series de un instrumento."""
        inst = state.get(instrument)
        for tf, seconds in state.timeframes.items():
            self.on_tick(inst.series[tf], seconds, price, now)
