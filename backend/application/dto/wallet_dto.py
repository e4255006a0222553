"""
FX Trader – Application DTO: Wallet
=====================================
Data Transfer Objects para depósitos y retiros.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WalletRequestCommand:
    """Solicitud de depósito o retiro."""

    owner_id: int
    amount: float
    method: str = ""
    reference: str = ""
