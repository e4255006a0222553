"""Domain services - Pure business logic with no external dependencies."""
from backend.domain.services.pnl_calculator import (
    DEFAULT_LEVERAGE,
    realized_pnl,
    required_margin,
)
from backend.domain.services.position_evaluator import (
    ClosureInstruction,
    CloseReason,
    PositionEvaluator,
)

__all__ = [
    "DEFAULT_LEVERAGE",
    "realized_pnl",
    "required_margin",
    "ClosureInstruction",
    "CloseReason",
    "PositionEvaluator",
]
