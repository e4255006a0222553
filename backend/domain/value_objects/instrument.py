"""
FX Trader – Domain Value Object: Instrument
=============================================
Catálogo estático de instrumentos simulados.

- frozen=True → inmutable, la configuración no cambia en runtime.
- volatility es la fracción del precio que define la amplitud del
  random walk: menor para pares de divisas, mayor para cripto/commodities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True, slots=True)
class InstrumentSpec:
    """Definición de un instrumento negociable."""

    name: str              # e.g. "EUR/USD"
    default_price: float   # precio inicial y de recuperación
    volatility: float      # fracción del precio por tick


DEFAULT_INSTRUMENTS: tuple[InstrumentSpec, ...] = (
    InstrumentSpec("EUR/USD", 1.08542, 0.0001),
    InstrumentSpec("GBP/USD", 1.26415, 0.0001),
    InstrumentSpec("USD/JPY", 150.243, 0.0001),
    InstrumentSpec("BTC/USD", 62450.50, 0.001),
    InstrumentSpec("ETH/USD", 3420.75, 0.001),
    InstrumentSpec("GOLD", 2034.50, 0.001),
    InstrumentSpec("OIL", 78.45, 0.001),
)


def instrument_catalog(
    instruments: tuple[InstrumentSpec, ...] = DEFAULT_INSTRUMENTS,
) -> Dict[str, InstrumentSpec]:
    """Mapping name → InstrumentSpec preservando el orden de declaración."""
    return {spec.name: spec for spec in instruments}
