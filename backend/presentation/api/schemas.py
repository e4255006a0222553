"""
FX Trader – API Schemas (Pydantic)
=====================================
Schemas de validación para los requests de la API REST.

Los nombres de campo siguen el formato del wire (user_id, asset, type)
que el frontend ya consume.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CreateAccountRequest(BaseModel):
    email: str
    role: str = "user"
    balance: Optional[float] = None


class OpenPositionRequest(BaseModel):
    user_id: int
    asset: str
    size: float
    type: str = Field(description="BUY | SELL")
    entry_price: float
    take_profit: Optional[float] = None
    stop_loss: Optional[float] = None


class ClosePositionRequest(BaseModel):
    user_id: int
    position_id: int
    close_price: float


class WalletRequest(BaseModel):
    user_id: int
    amount: float
    method: str = ""
    reference: str = ""


class ApproveTransactionRequest(BaseModel):
    transaction_id: int
