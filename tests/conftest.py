import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Project root on sys.path so tests import the top-level `backend` package
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from backend.application.services.account_locks import AccountLockRegistry  # noqa: E402
from backend.application.services.settlement_executor import SettlementExecutor  # noqa: E402
from backend.application.state.market_state import MarketStateManager  # noqa: E402
from backend.application.use_cases.account_usecase import AccountUseCase  # noqa: E402
from backend.application.use_cases.trading_usecase import TradingUseCase  # noqa: E402
from backend.infrastructure.persistence.database import DatabaseManager  # noqa: E402
from backend.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from backend.shared.config.settings import Settings  # noqa: E402


def sqlite_settings(tmp_path, **overrides) -> Settings:
    return Settings(db_url=f"sqlite+aiosqlite:///{tmp_path / 'fxtrader_test.db'}", **overrides)


@pytest_asyncio.fixture
async def db(tmp_path):
    manager = DatabaseManager(sqlite_settings(tmp_path))
    await manager.initialize()
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
def uow_factory(db):
    return lambda: SqlAlchemyUnitOfWork(db.session_factory)


@pytest.fixture
def market_state():
    return MarketStateManager()


@pytest.fixture
def locks():
    return AccountLockRegistry()


@pytest.fixture
def settlement(uow_factory, locks):
    return SettlementExecutor(uow_factory, locks)


@pytest.fixture
def trading(uow_factory, market_state, settlement):
    return TradingUseCase(uow_factory, market_state, settlement)


@pytest_asyncio.fixture
async def account(uow_factory):
    return await AccountUseCase(uow_factory).create_account("trader@example.com", balance=10_000.0)


@pytest.fixture
def balance_of(uow_factory):
    async def _read(account_id: int) -> float:
        async with uow_factory() as uow:
            return (await uow.accounts.get(account_id)).balance
    return _read
