import pytest
from sqlalchemy.dialects import mysql
from sqlalchemy.schema import CreateTable

from backend.application.dto.position_dto import OpenPositionCommand
from backend.infrastructure.persistence.models import (
    AccountModel,
    PositionModel,
    WalletTransactionModel,
)


def mysql_ddl(model) -> str:
    return str(CreateTable(model.__table__).compile(dialect=mysql.dialect()))


@pytest.mark.parametrize("model, columns", [
    (AccountModel, ["balance"]),
    (PositionModel, ["size", "entry_price", "take_profit", "stop_loss", "close_price", "pnl"]),
    (WalletTransactionModel, ["amount"]),
])
def test_money_columns_are_exact_numeric_on_mysql(model, columns):
    ddl = mysql_ddl(model)

    assert "FLOAT" not in ddl
    for column in columns:
        assert f"{column} NUMERIC(20, 8)" in ddl


@pytest.mark.asyncio
async def test_settled_values_read_back_unchanged(trading, settlement, account, uow_factory, balance_of):
    position = await trading.open_position(OpenPositionCommand(
        owner_id=account.id, instrument="EUR/USD", size=1.0, side="BUY",
        entry_price=1.08542, take_profit=1.1050,
    ))

    assert await settlement.settle(position, 1.1050, 0.0050) is True

    async with uow_factory() as uow:
        stored = await uow.positions.get(position.id)
    assert isinstance(stored.pnl, float)
    assert stored.entry_price == 1.08542
    assert stored.close_price == 1.1050
    assert stored.pnl == 0.0050
    assert await balance_of(account.id) == pytest.approx(10_000.005, abs=1e-9)
