import asyncio

import pytest

from backend.application.dto.position_dto import OpenPositionCommand
from backend.application.services.settlement_executor import SettlementExecutor
from backend.domain.exceptions.domain_errors import PositionAlreadyClosedError
from backend.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


class FailingBalanceUnitOfWork(SqlAlchemyUnitOfWork):
    """Fails after the position row is already marked closed."""

    async def begin(self) -> None:
        await super().begin()

        async def broken_adjust(account_id, delta):
            raise RuntimeError("disk I/O error")

        self.accounts.adjust_balance = broken_adjust


async def open_long(trading, owner_id):
    return await trading.open_position(OpenPositionCommand(
        owner_id=owner_id, instrument="EUR/USD", size=1.0, side="BUY",
        entry_price=1.1000, take_profit=1.1050,
    ))


@pytest.mark.asyncio
async def test_settlement_closes_and_credits_together(trading, settlement, account, uow_factory, balance_of):
    position = await open_long(trading, account.id)

    assert await settlement.settle(position, 1.1050, 0.0050) is True

    assert not position.is_open
    async with uow_factory() as uow:
        stored = await uow.positions.get(position.id)
    assert not stored.is_open
    assert stored.close_price == 1.1050
    assert await balance_of(account.id) == pytest.approx(10_000.005)
    assert settlement.stats == {"settled": 1, "failed": 0}


@pytest.mark.asyncio
async def test_fault_mid_unit_rolls_back_both_writes(trading, db, locks, account, uow_factory, balance_of):
    position = await open_long(trading, account.id)
    failing = SettlementExecutor(lambda: FailingBalanceUnitOfWork(db.session_factory), locks)

    assert await failing.settle(position, 1.1050, 0.0050) is False

    assert position.is_open
    async with uow_factory() as uow:
        stored = await uow.positions.get(position.id)
    assert stored.is_open
    assert stored.close_price is None
    assert await balance_of(account.id) == 10_000.0
    assert failing.stats["failed"] == 1

    # Retry with a healthy unit succeeds
    healthy = SettlementExecutor(uow_factory, locks)
    assert await healthy.settle(position, 1.1050, 0.0050) is True
    assert await balance_of(account.id) == pytest.approx(10_000.005)


@pytest.mark.asyncio
async def test_double_settlement_credits_once(trading, settlement, account, uow_factory, balance_of):
    position = await open_long(trading, account.id)
    async with uow_factory() as uow:
        stale_copy = await uow.positions.get(position.id)

    await settlement.execute(position, 1.1050, 0.0050)
    with pytest.raises(PositionAlreadyClosedError):
        await settlement.execute(stale_copy, 1.1050, 0.0050)

    assert await balance_of(account.id) == pytest.approx(10_000.005)


@pytest.mark.asyncio
async def test_concurrent_settlements_on_same_account_are_serialized(trading, settlement, account, balance_of):
    positions = [await open_long(trading, account.id) for _ in range(4)]

    results = await asyncio.gather(*(settlement.settle(p, 1.2, 10.0) for p in positions))

    assert all(results)
    assert await balance_of(account.id) == pytest.approx(10_040.0)


class BrokenCloseUnitOfWork(SqlAlchemyUnitOfWork):
    """Releases the session, then reports an error after the commit landed."""

    async def close(self) -> None:
        await super().close()
        raise RuntimeError("connection reset")


@pytest.mark.asyncio
async def test_cleanup_error_after_commit_still_counts_as_settled(db, locks, trading, account, balance_of):
    position = await open_long(trading, account.id)
    executor = SettlementExecutor(lambda: BrokenCloseUnitOfWork(db.session_factory), locks)

    assert await executor.settle(position, 1.1050, 0.0050) is True

    assert not position.is_open
    assert executor.stats == {"settled": 1, "failed": 0}
    assert await balance_of(account.id) == pytest.approx(10_000.005)
