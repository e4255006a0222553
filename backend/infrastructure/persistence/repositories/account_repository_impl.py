"""
Account Repository Implementation.

Implementa IAccountRepository con SQLAlchemy async.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.domain.entities.account import Account
from backend.domain.exceptions.domain_errors import AccountNotFoundError
from backend.domain.repositories.account_repository import IAccountRepository
from backend.infrastructure.persistence.mappers.wallet_mapper import AccountMapper
from backend.infrastructure.persistence.models.account import AccountModel


class AccountRepositoryImpl(IAccountRepository):

    def __init__(self, session: AsyncSession):
        self._session = session
        self._mapper = AccountMapper()

    async def add(self, account: Account) -> int:
        model = AccountModel(**self._mapper.to_model(account))
        self._session.add(model)
        await self._session.flush()
        return model.id

    async def get(self, account_id: int) -> Optional[Account]:
        model = await self._session.get(AccountModel, account_id)
        return self._mapper.to_entity(model) if model is not None else None

    async def get_by_email(self, email: str) -> Optional[Account]:
        result = await self._session.execute(
            select(AccountModel).where(AccountModel.email == email)
        )
        model = result.scalar_one_or_none()
        return self._mapper.to_entity(model) if model is not None else None

    async def list_all(self) -> List[Account]:
        result = await self._session.execute(select(AccountModel).order_by(AccountModel.id))
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def adjust_balance(self, account_id: int, delta: float) -> None:
        """balance = balance + delta en la base, sin leer-modificar-escribir."""
        result = await self._session.execute(
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(balance=AccountModel.balance + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise AccountNotFoundError(account_id)
