"""
Wallet Use Case.

Depósitos, retiros y su aprobación administrativa.

ESCRITURAS DE BALANCE:
    request_withdrawal  → lock(cuenta) + UoW: chequeo, tx PENDING, balance -= monto
    approve_transaction → lock(cuenta) + UoW: tx APPROVED (+ balance += monto si depósito)

Ambas comparten el lock por cuenta con la liquidación de posiciones,
por lo que nunca se intercalan con un cierre sobre la misma cuenta.
"""

from __future__ import annotations

import math
from typing import List

from backend.application.dto.wallet_dto import WalletRequestCommand
from backend.application.services.account_locks import AccountLockRegistry
from backend.domain.entities.wallet_transaction import (
    TransactionStatus,
    TransactionType,
    WalletTransaction,
)
from backend.domain.exceptions.domain_errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidTransactionError,
    ValidationError,
)
from backend.domain.repositories.unit_of_work import UnitOfWorkFactory
from backend.shared.logging.logger import get_logger

logger = get_logger("wallet")


class WalletUseCase:
    """Caso de uso: movimientos de billetera."""

    def __init__(self, uow_factory: UnitOfWorkFactory, locks: AccountLockRegistry) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    async def request_deposit(self, cmd: WalletRequestCommand) -> WalletTransaction:
        """Registra un depósito PENDING. El balance cambia al aprobarse."""
        _require_amount(cmd.amount)
        tx = WalletTransaction(
            owner_id=cmd.owner_id,
            type=TransactionType.DEPOSIT,
            amount=cmd.amount,
            method=cmd.method,
            reference=cmd.reference,
        )
        async with self._uow_factory() as uow:
            if await uow.accounts.get(cmd.owner_id) is None:
                raise AccountNotFoundError(cmd.owner_id)
            tx.id = await uow.transactions.add(tx)
            await uow.commit()

        logger.info("Depósito solicitado | tx=%s owner=%s monto=%.2f", tx.id, tx.owner_id, tx.amount)
        return tx

    async def request_withdrawal(self, cmd: WalletRequestCommand) -> WalletTransaction:
        """
        Registra un retiro PENDING y debita el balance en la misma unidad.

        Raises:
            InsufficientBalanceError si balance < monto (sin cambios de estado).
        """
        _require_amount(cmd.amount)
        tx = WalletTransaction(
            owner_id=cmd.owner_id,
            type=TransactionType.WITHDRAWAL,
            amount=cmd.amount,
            method=cmd.method,
            reference=cmd.reference,
        )
        async with self._locks.lock_for(cmd.owner_id):
            async with self._uow_factory() as uow:
                account = await uow.accounts.get(cmd.owner_id)
                if account is None:
                    raise AccountNotFoundError(cmd.owner_id)
                if account.balance < cmd.amount:
                    raise InsufficientBalanceError(requested=cmd.amount, available=account.balance)
                tx.id = await uow.transactions.add(tx)
                await uow.accounts.adjust_balance(cmd.owner_id, -cmd.amount)
                await uow.commit()

        logger.info("Retiro solicitado | tx=%s owner=%s monto=%.2f", tx.id, tx.owner_id, tx.amount)
        return tx

    async def approve_transaction(self, transaction_id: int) -> WalletTransaction:
        """
        Aprueba una transacción PENDING. Un depósito acredita el balance.

        Raises:
            InvalidTransactionError si no existe o ya no está pendiente.
        """
        async with self._uow_factory() as uow:
            tx = await uow.transactions.get(transaction_id)
        if tx is None or not tx.is_pending:
            raise InvalidTransactionError(
                f"Transacción inválida: {transaction_id}", transaction_id=transaction_id,
            )

        async with self._locks.lock_for(tx.owner_id):
            async with self._uow_factory() as uow:
                if not await uow.transactions.mark_approved(transaction_id):
                    raise InvalidTransactionError(
                        f"Transacción ya procesada: {transaction_id}",
                        transaction_id=transaction_id,
                    )
                if tx.type == TransactionType.DEPOSIT:
                    await uow.accounts.adjust_balance(tx.owner_id, tx.amount)
                await uow.commit()

        tx.status = TransactionStatus.APPROVED
        logger.info(
            "Transacción aprobada | tx=%s %s owner=%s monto=%.2f",
            tx.id, tx.type.value, tx.owner_id, tx.amount,
        )
        return tx

    async def list_transactions(self, owner_id: int) -> List[WalletTransaction]:
        async with self._uow_factory() as uow:
            return await uow.transactions.find_by_owner(owner_id)

    async def list_pending(self) -> List[WalletTransaction]:
        async with self._uow_factory() as uow:
            return await uow.transactions.find_pending()


def _require_amount(amount: float) -> None:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise ValidationError("amount debe ser un número positivo", field="amount", value=amount)
