import itertools
from unittest.mock import MagicMock

import pytest

from backend.application.dto.position_dto import ClosePositionCommand, OpenPositionCommand
from backend.application.ports.market_broadcaster import IMarketBroadcaster
from backend.application.services.settlement_executor import SettlementExecutor
from backend.application.use_cases.account_usecase import AccountUseCase
from backend.application.use_cases.trading_usecase import TradingUseCase
from backend.domain.exceptions.domain_errors import (
    AccountNotFoundError,
    InsufficientMarginError,
    PositionAlreadyClosedError,
    PositionNotFoundError,
    UnknownInstrumentError,
    ValidationError,
)


def open_cmd(owner_id, **overrides):
    fields = dict(
        owner_id=owner_id, instrument="EUR/USD", size=1.0, side="BUY",
        entry_price=1.1000, take_profit=1.1050, stop_loss=None,
    )
    fields.update(overrides)
    return OpenPositionCommand(**fields)


@pytest.mark.asyncio
async def test_open_position_persists_open_row(trading, account):
    position = await trading.open_position(open_cmd(account.id))

    assert position.id is not None
    [stored] = await trading.list_open(account.id)
    assert stored.id == position.id
    assert stored.take_profit == 1.1050
    assert stored.stop_loss is None
    assert stored.is_open


@pytest.mark.asyncio
async def test_margin_rejection_leaves_state_unchanged(trading, uow_factory, balance_of):
    poor = await AccountUseCase(uow_factory).create_account("poor@example.com", balance=100.0)

    # margin = 10_000 * 1.1 / 100 = 110 > 100
    with pytest.raises(InsufficientMarginError) as exc:
        await trading.open_position(open_cmd(poor.id, size=10_000.0))

    assert exc.value.code == "INSUFFICIENT_MARGIN"
    assert await trading.list_open(poor.id) == []
    assert await balance_of(poor.id) == 100.0


@pytest.mark.asyncio
async def test_margin_is_checked_but_not_debited(trading, account, balance_of):
    await trading.open_position(open_cmd(account.id, size=5_000.0))
    assert await balance_of(account.id) == 10_000.0


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides, error", [
    ({"side": "HOLD"}, ValidationError),
    ({"instrument": "DOGE/USD"}, UnknownInstrumentError),
    ({"size": 0}, ValidationError),
    ({"entry_price": -1.0}, ValidationError),
    ({"stop_loss": -2.0}, ValidationError),
])
async def test_open_rejects_bad_input(trading, account, overrides, error):
    with pytest.raises(error):
        await trading.open_position(open_cmd(account.id, **overrides))


@pytest.mark.asyncio
async def test_zero_thresholds_mean_unset(trading, account):
    position = await trading.open_position(open_cmd(account.id, take_profit=0, stop_loss=0))
    assert position.take_profit is None
    assert position.stop_loss is None


@pytest.mark.asyncio
async def test_open_for_unknown_account(trading):
    with pytest.raises(AccountNotFoundError):
        await trading.open_position(open_cmd(999))


@pytest.mark.asyncio
async def test_manual_close_settles_and_broadcasts(uow_factory, market_state, settlement, account, balance_of):
    broadcaster = MagicMock(spec=IMarketBroadcaster)
    trading = TradingUseCase(uow_factory, market_state, settlement, broadcaster=broadcaster)
    position = await trading.open_position(open_cmd(account.id, side="SELL", take_profit=None))

    result = await trading.close_position(ClosePositionCommand(account.id, position.id, 1.0900))

    assert result.pnl == pytest.approx(0.0100)
    assert result.to_dict()["success"] is True
    assert await balance_of(account.id) == pytest.approx(10_000.01)
    assert await trading.list_open(account.id) == []
    [closed] = await trading.history(account.id)
    assert closed.close_price == 1.0900
    assert closed.pnl == pytest.approx(0.0100)
    assert closed.closed_at is not None

    event_type, data = broadcaster.publish_event.call_args.args
    assert event_type == "position_closed"
    assert data["reason"] == "manual"
    assert data["position_id"] == position.id


@pytest.mark.asyncio
async def test_close_rejections(trading, account, uow_factory):
    other = await AccountUseCase(uow_factory).create_account("other@example.com")
    position = await trading.open_position(open_cmd(account.id))

    with pytest.raises(PositionNotFoundError):
        await trading.close_position(ClosePositionCommand(other.id, position.id, 1.1))
    with pytest.raises(PositionNotFoundError):
        await trading.close_position(ClosePositionCommand(account.id, 12345, 1.1))

    await trading.close_position(ClosePositionCommand(account.id, position.id, 1.1))
    with pytest.raises(PositionAlreadyClosedError):
        await trading.close_position(ClosePositionCommand(account.id, position.id, 1.1))


@pytest.mark.asyncio
async def test_history_is_capped_and_most_recent_first(uow_factory, market_state, locks, account):
    clock = itertools.count(1_000).__next__
    settlement = SettlementExecutor(uow_factory, locks, clock=lambda: float(clock()))
    trading = TradingUseCase(uow_factory, market_state, settlement, history_limit=3)

    ids = []
    for _ in range(5):
        position = await trading.open_position(open_cmd(account.id))
        await trading.close_position(ClosePositionCommand(account.id, position.id, 1.1010))
        ids.append(position.id)

    history = await trading.history(account.id)
    assert [p.id for p in history] == list(reversed(ids))[:3]
    assert [p.closed_at for p in history] == [1004.0, 1003.0, 1002.0]
