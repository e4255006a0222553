"""
FX Trader – Account / Wallet Mappers
======================================
Mapea Account ↔ AccountModel y WalletTransaction ↔ WalletTransactionModel.
"""

from __future__ import annotations

from typing import Any, Dict

from backend.domain.entities.account import Account
from backend.domain.entities.wallet_transaction import (
    TransactionStatus,
    TransactionType,
    WalletTransaction,
)
from backend.infrastructure.persistence.models.account import AccountModel
from backend.infrastructure.persistence.models.wallet_transaction import (
    WalletTransactionModel,
)


class AccountMapper:

    def to_model(self, account: Account) -> Dict[str, Any]:
        return {
            "email": account.email,
            "balance": account.balance,
            "role": account.role,
            "created_at": account.created_at,
        }

    def to_entity(self, model: AccountModel) -> Account:
        return Account(
            email=model.email,
            balance=model.balance,
            role=model.role,
            id=model.id,
            created_at=model.created_at,
        )


class WalletTransactionMapper:

    def to_model(self, tx: WalletTransaction) -> Dict[str, Any]:
        return {
            "account_id": tx.owner_id,
            "type": tx.type.value,
            "amount": tx.amount,
            "status": tx.status.value,
            "method": tx.method,
            "reference": tx.reference,
            "created_at": tx.created_at,
        }

    def to_entity(self, model: WalletTransactionModel) -> WalletTransaction:
        return WalletTransaction(
            owner_id=model.account_id,
            type=TransactionType(model.type),
            amount=model.amount,
            method=model.method,
            reference=model.reference,
            status=TransactionStatus(model.status),
            id=model.id,
            created_at=model.created_at,
        )
