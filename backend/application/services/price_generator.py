"""
FX Trader – Price Generator (random walk acotado)
===================================================
Avanza el precio de cada instrumento una vez por tick.

ALGORITMO:
    change = uniform(-0.5, 0.5) × volatility × price
    price  = price + change

    volatility es fija por instrumento (0.0001 divisas, 0.001 cripto /
    commodities), por lo que el movimiento máximo por tick es ±0.05%.

AUTO-REPARACIÓN:
    Si el precio almacenado no es un número finito positivo (estado
    corrupto), se restablece al precio por defecto del instrumento en
    lugar de propagar un valor envenenado. No se lanza excepción.

DETERMINISMO:
    El generador recibe un random.Random inyectable; con semilla fija
    la secuencia de precios es reproducible en tests.
"""

from __future__ import annotations

import math
import random
from typing import Dict, Optional

from backend.application.state.market_state import MarketStateManager
from backend.shared.logging.logger import get_logger

logger = get_logger("price_generator")


class PriceGenerator:
    """
    Random walk acotado sobre el MarketStateManager.

    Uso:
        generator = PriceGenerator(rng=random.Random(42))
        new_price = generator.advance(state, "EUR/USD")
    """

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)
        self._resets = 0

    def advance(self, state: MarketStateManager, instrument: str) -> float:
        """Avanzar un tick el precio de un instrumento. Retorna el nuevo precio."""
        inst = state.get(instrument)
        current = inst.price

        if not _is_valid_price(current):
            default = inst.spec.default_price
            logger.warning(
                "Precio corrupto para %s (%r), restablecido a %.5f",
                instrument, current, default,
            )
            state.set_price(instrument, default)
            self._resets += 1
            return default

        change = self._rng.uniform(-0.5, 0.5) * (current * inst.spec.volatility)
        new_price = current + change
        state.set_price(instrument, new_price)
        return new_price

    def advance_all(self, state: MarketStateManager) -> Dict[str, float]:
        """Avanzar todos los instrumentos. Retorna {instrumento: precio}."""
        return {name: self.advance(state, name) for name in state.instruments}

    @property
    def resets(self) -> int:
        """Cantidad de precios corruptos restablecidos."""
        return self._resets


def _is_valid_price(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )
