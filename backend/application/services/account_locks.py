"""
FX Trader – Account Locks
===========================
Registro de asyncio.Lock por cuenta.

Toda escritura de balance (liquidación, aprobación de depósito,
solicitud de retiro) se ejecuta con el lock de la cuenta tomado,
de modo que dos unidades de trabajo sobre la misma cuenta nunca se
intercalan. Cuentas distintas no se bloquean entre sí.
"""

from __future__ import annotations

import asyncio
from typing import Dict


class AccountLockRegistry:
    """Lock por cuenta, creado bajo demanda."""

    def __init__(self) -> None:
        self._locks: Dict[int, asyncio.Lock] = {}

    def lock_for(self, account_id: int) -> asyncio.Lock:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[account_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
