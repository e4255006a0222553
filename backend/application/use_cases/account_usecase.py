"""
Account Use Case.

Alta y consulta de cuentas. La autenticación vive fuera del núcleo:
el caller identifica la cuenta por su ID.
"""

from __future__ import annotations

import math
from typing import List, Optional

from backend.domain.entities.account import Account
from backend.domain.exceptions.domain_errors import (
    AccountNotFoundError,
    DuplicateAccountError,
    ValidationError,
)
from backend.domain.repositories.unit_of_work import UnitOfWorkFactory
from backend.shared.logging.logger import get_logger

logger = get_logger("accounts")


class AccountUseCase:
    """Caso de uso: gestión de cuentas."""

    def __init__(self, uow_factory: UnitOfWorkFactory, default_balance: float = 10_000.0) -> None:
        self._uow_factory = uow_factory
        self._default_balance = default_balance

    async def create_account(
        self, email: str, role: str = "user", balance: Optional[float] = None,
    ) -> Account:
        email = (email or "").strip().lower()
        if "@" not in email:
            raise ValidationError(f"Email inválido: {email}", field="email", value=email)
        if balance is not None and (not math.isfinite(balance) or balance < 0):
            raise ValidationError(
                "balance debe ser un número finito no negativo", field="balance", value=balance,
            )

        account = Account(
            email=email,
            balance=self._default_balance if balance is None else balance,
            role=role,
        )
        async with self._uow_factory() as uow:
            if await uow.accounts.get_by_email(email) is not None:
                raise DuplicateAccountError(email)
            account.id = await uow.accounts.add(account)
            await uow.commit()

        logger.info("Cuenta creada | id=%s email=%s balance=%.2f", account.id, email, account.balance)
        return account

    async def get_account(self, account_id: int) -> Account:
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def list_accounts(self) -> List[Account]:
        async with self._uow_factory() as uow:
            return await uow.accounts.list_all()
