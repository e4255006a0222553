"""
FX Trader – Domain Value Object: Timeframe
============================================
Duraciones fijas usadas para agrupar ticks en velas.

ALINEACIÓN TEMPORAL:
  Las velas se alinean a múltiplos exactos del intervalo:
    - 1m  (60s)    → 00:00, 00:01, 00:02, ...
    - 5m  (300s)   → 00:00, 00:05, 00:10, ...
    - 24h (86400s) → 00:00 UTC de cada día
"""

from __future__ import annotations

import math
from typing import Dict

# Mapeo de nombre de TF a segundos
TIMEFRAME_SECONDS: Dict[str, int] = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "30m": 1800,
    "1h": 3600,
    "3h": 10800,
    "12h": 43200,
    "24h": 86400,
}


def align_period_start(epoch: float, interval: int) -> int:
    """Inicio del periodo (epoch seg) que contiene `epoch`."""
    return int(math.floor(epoch / interval)) * interval
