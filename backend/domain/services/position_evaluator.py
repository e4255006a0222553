"""
FX Trader – Domain Service: Position Evaluator
================================================
Detecta cruces de Take Profit / Stop Loss sobre posiciones abiertas.

REGLAS:
    BUY:  TP si price ≥ take_profit, si no SL si price ≤ stop_loss
    SELL: TP si price ≤ take_profit, si no SL si price ≥ stop_loss

    Se evalúa TP ANTES que SL (desempate fijo si ambos cruzan en el
    mismo tick). Sin umbrales la posición queda abierta sin importar
    el precio: no hay liquidación implícita.

PRECIO DE CIERRE:
    Es el umbral cruzado, NO el precio de mercado instantáneo.
    Modela ejecución garantizada al nivel de disparo.

Servicio puro: no hace I/O ni muta las posiciones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping, Optional

from backend.domain.entities.position import Position
from backend.domain.services.pnl_calculator import realized_pnl
from backend.shared.logging.logger import get_logger

logger = get_logger("position_evaluator")


class CloseReason(str, Enum):
    TAKE_PROFIT = "take_profit"
    STOP_LOSS = "stop_loss"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class ClosureInstruction:
    """Orden de cierre producida por el evaluador."""

    position: Position
    close_price: float
    pnl: float
    reason: CloseReason


class PositionEvaluator:
    """Evalúa posiciones abiertas contra el mapa de precios actual."""

    def evaluate(
        self,
        open_positions: Iterable[Position],
        current_prices: Mapping[str, float],
    ) -> List[ClosureInstruction]:
        instructions: List[ClosureInstruction] = []
        for position in open_positions:
            if not position.is_open:
                continue

            current = current_prices.get(position.instrument)
            if current is None:
                logger.warning(
                    "Sin precio para %s, posición %s no evaluada",
                    position.instrument, position.id,
                )
                continue

            instruction = self.check(position, current)
            if instruction is not None:
                instructions.append(instruction)
        return instructions

    def check(self, position: Position, current: float) -> Optional[ClosureInstruction]:
        """Evaluar una sola posición. None si sigue abierta."""
        tp = position.take_profit
        sl = position.stop_loss

        if position.is_long:
            if tp is not None and current >= tp:
                return self._instruction(position, tp, CloseReason.TAKE_PROFIT)
            if sl is not None and current <= sl:
                return self._instruction(position, sl, CloseReason.STOP_LOSS)
        else:
            if tp is not None and current <= tp:
                return self._instruction(position, tp, CloseReason.TAKE_PROFIT)
            if sl is not None and current >= sl:
                return self._instruction(position, sl, CloseReason.STOP_LOSS)
        return None

    @staticmethod
    def _instruction(
        position: Position, close_price: float, reason: CloseReason,
    ) -> ClosureInstruction:
        pnl = realized_pnl(
            position.side, position.entry_price, close_price, position.size,
        )
        return ClosureInstruction(
            position=position,
            close_price=close_price,
            pnl=pnl,
            reason=reason,
        )
