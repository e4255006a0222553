"""
FX Trader – Market State Manager
==================================
Estado de simulación en memoria: precio actual y series de velas por
(instrumento, timeframe).

PROPIEDAD EXPLÍCITA:
- No hay estado global del proceso. El contenedor crea UNA instancia y
  la inyecta al loop de ticks; los tests crean la suya propia.

PROTECCIÓN DE MEMORIA:
- Cada serie usa collections.deque con maxlen → descarta automáticamente
  la vela más antigua (FIFO por antigüedad) cuando se excede el límite.
- Nunca se almacenan más de `max_candles` velas por serie.

RACE CONDITIONS:
- Todas las operaciones se ejecutan dentro del mismo event loop asyncio.
- Solo el loop de ticks escribe; la API y el broadcast leen snapshots.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional

from backend.domain.entities.candle import Candle
from backend.domain.exceptions.domain_errors import UnknownInstrumentError, ValidationError
from backend.domain.value_objects.instrument import DEFAULT_INSTRUMENTS, InstrumentSpec
from backend.domain.value_objects.timeframe import TIMEFRAME_SECONDS
from backend.shared.logging.logger import get_logger

logger = get_logger("market_state")

DEFAULT_MAX_CANDLES = 200


@dataclass
class InstrumentState:
    """Estado de mercado para UN instrumento."""

    spec: InstrumentSpec
    price: float
    # Velas por timeframe: { "1m": deque, "5m": deque, ... }
    series: Dict[str, Deque[Candle]] = field(default_factory=dict)
    total_ticks: int = 0


class MarketStateManager:
    """
    Gestor centralizado del estado de simulación para todos los instrumentos.

    Acceso: state.get(instrument) → InstrumentState
    """

    def __init__(
        self,
        instruments: Iterable[InstrumentSpec] = DEFAULT_INSTRUMENTS,
        timeframes: Optional[Iterable[str]] = None,
        max_candles: int = DEFAULT_MAX_CANDLES,
    ) -> None:
        self._max_candles = max_candles
        self._timeframes: Dict[str, int] = {}

        for tf in (timeframes if timeframes is not None else TIMEFRAME_SECONDS):
            if tf not in TIMEFRAME_SECONDS:
                logger.warning("Timeframe '%s' no reconocido, ignorado", tf)
                continue
            self._timeframes[tf] = TIMEFRAME_SECONDS[tf]

        self._states: Dict[str, InstrumentState] = {}
        for spec in instruments:
            self._states[spec.name] = InstrumentState(
                spec=spec,
                price=spec.default_price,
                series={tf: deque(maxlen=max_candles) for tf in self._timeframes},
            )

        logger.info(
            "MarketState inicializado: %d instrumentos, timeframes=%s, max_candles=%d",
            len(self._states), ", ".join(self._timeframes), max_candles,
        )

    # ════════════════════════════════════════════════════════════════
    #  ACCESO
    # ════════════════════════════════════════════════════════════════

    @property
    def instruments(self) -> List[str]:
        return list(self._states.keys())

    @property
    def timeframes(self) -> Dict[str, int]:
        """Mapping timeframe → segundos (solo los configurados)."""
        return dict(self._timeframes)

    @property
    def max_candles(self) -> int:
        return self._max_candles

    def has_instrument(self, instrument: str) -> bool:
        return instrument in self._states

    def get(self, instrument: str) -> InstrumentState:
        try:
            return self._states[instrument]
        except KeyError:
            raise UnknownInstrumentError(instrument) from None

    def get_price(self, instrument: str) -> float:
        return self.get(instrument).price

    def set_price(self, instrument: str, price: float) -> None:
        state = self.get(instrument)
        state.price = price
        state.total_ticks += 1

    def get_series(self, instrument: str, timeframe: str) -> Deque[Candle]:
        """Serie viva (mutable) de un (instrumento, timeframe)."""
        state = self.get(instrument)
        if timeframe not in state.series:
            raise ValidationError(
                f"Timeframe no configurado: {timeframe}", field="timeframe", value=timeframe,
            )
        return state.series[timeframe]

    # ════════════════════════════════════════════════════════════════
    #  SNAPSHOTS (solo lectura, serializables)
    # ════════════════════════════════════════════════════════════════

    def prices(self) -> Dict[str, float]:
        """Copia del mapa de precios actual."""
        return {name: s.price for name, s in self._states.items()}

    def get_candles(
        self, instrument: str, timeframe: str, count: int | None = None,
    ) -> list[Candle]:
        """Últimas N velas de un (instrumento, timeframe)."""
        buf = list(self.get_series(instrument, timeframe))
        if count is None:
            return buf
        return buf[-count:]

    def candles_snapshot(self) -> Dict[str, Dict[str, list[dict]]]:
        """{instrumento: {timeframe: [vela, ...]}} para broadcast / API."""
        return {
            name: {tf: [c.to_dict() for c in buf] for tf, buf in s.series.items()}
            for name, s in self._states.items()
        }

    def snapshot(self) -> dict:
        """Snapshot resumido para diagnóstico."""
        return {
            name: {
                "price": s.price,
                "total_ticks": s.total_ticks,
                "candles": {tf: len(buf) for tf, buf in s.series.items()},
            }
            for name, s in self._states.items()
        }
