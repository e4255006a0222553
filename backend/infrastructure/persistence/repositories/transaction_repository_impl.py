"""
Wallet Transaction Repository Implementation.

Implementa ITransactionRepository con SQLAlchemy async.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.domain.entities.wallet_transaction import TransactionStatus, WalletTransaction
from backend.domain.repositories.transaction_repository import ITransactionRepository
from backend.infrastructure.persistence.mappers.wallet_mapper import WalletTransactionMapper
from backend.infrastructure.persistence.models.wallet_transaction import (
    WalletTransactionModel,
)


class TransactionRepositoryImpl(ITransactionRepository):

    def __init__(self, session: AsyncSession):
        self._session = session
        self._mapper = WalletTransactionMapper()

    async def add(self, transaction: WalletTransaction) -> int:
        model = WalletTransactionModel(**self._mapper.to_model(transaction))
        self._session.add(model)
        await self._session.flush()
        return model.id

    async def get(self, transaction_id: int) -> Optional[WalletTransaction]:
        model = await self._session.get(WalletTransactionModel, transaction_id)
        return self._mapper.to_entity(model) if model is not None else None

    async def find_by_owner(self, owner_id: int) -> List[WalletTransaction]:
        result = await self._session.execute(
            select(WalletTransactionModel)
            .where(WalletTransactionModel.account_id == owner_id)
            .order_by(desc(WalletTransactionModel.created_at), desc(WalletTransactionModel.id))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_pending(self) -> List[WalletTransaction]:
        result = await self._session.execute(
            select(WalletTransactionModel)
            .where(WalletTransactionModel.status == TransactionStatus.PENDING.value)
            .order_by(WalletTransactionModel.id)
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def mark_approved(self, transaction_id: int) -> bool:
        result = await self._session.execute(
            update(WalletTransactionModel)
            .where(WalletTransactionModel.id == transaction_id)
            .where(WalletTransactionModel.status == TransactionStatus.PENDING.value)
            .values(status=TransactionStatus.APPROVED.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
