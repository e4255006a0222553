"""Domain value objects."""
from backend.domain.value_objects.instrument import (
    DEFAULT_INSTRUMENTS,
    InstrumentSpec,
    instrument_catalog,
)
from backend.domain.value_objects.timeframe import TIMEFRAME_SECONDS, align_period_start

__all__ = [
    "DEFAULT_INSTRUMENTS",
    "InstrumentSpec",
    "instrument_catalog",
    "TIMEFRAME_SECONDS",
    "align_period_start",
]
