import asyncio
from unittest.mock import MagicMock

import pytest

from backend.application.dto.position_dto import OpenPositionCommand
from backend.application.ports.market_broadcaster import IMarketBroadcaster
from backend.application.services.candle_aggregator import CandleAggregator
from backend.application.services.price_generator import PriceGenerator
from backend.application.services.settlement_executor import SettlementExecutor
from backend.application.use_cases.process_tick_usecase import ProcessTickUseCase
from backend.domain.services.position_evaluator import PositionEvaluator
from backend.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

T0 = 1_700_000_040.0


class ScriptedGenerator(PriceGenerator):
    """Applies scripted prices per tick; unscripted instruments keep their price."""

    def __init__(self, script):
        super().__init__(seed=0)
        self._script = list(script)

    def advance_all(self, state):
        prices = state.prices()
        if self._script:
            prices.update(self._script.pop(0))
        for name, price in prices.items():
            state.set_price(name, price)
        return prices


class StuckSettlement(SettlementExecutor):
    """Never finishes for one position id."""

    def __init__(self, *args, stuck_id, **kwargs):
        super().__init__(*args, **kwargs)
        self._stuck_id = stuck_id

    async def settle(self, position, close_price, pnl):
        if position.id == self._stuck_id:
            await asyncio.Event().wait()
        return await super().settle(position, close_price, pnl)


def make_loop(market_state, uow_factory, settlement, generator, broadcaster=None, **kwargs):
    return ProcessTickUseCase(
        market_state=market_state,
        generator=generator,
        aggregator=CandleAggregator(),
        evaluator=PositionEvaluator(),
        settlement=settlement,
        uow_factory=uow_factory,
        broadcaster=broadcaster,
        **kwargs,
    )


async def open_long(trading, owner_id, tp=1.1050, sl=None, instrument="EUR/USD", entry=1.1000):
    return await trading.open_position(OpenPositionCommand(
        owner_id=owner_id, instrument=instrument, size=1.0, side="BUY",
        entry_price=entry, take_profit=tp, stop_loss=sl,
    ))


@pytest.mark.asyncio
async def test_tick_closes_position_at_take_profit(market_state, uow_factory, settlement, trading, account, balance_of):
    position = await open_long(trading, account.id)
    broadcaster = MagicMock(spec=IMarketBroadcaster)
    generator = ScriptedGenerator([{"EUR/USD": 1.1020}, {"EUR/USD": 1.1060}])
    loop = make_loop(market_state, uow_factory, settlement, generator, broadcaster)

    first = await loop.run_tick(now=T0)
    assert first.closed == []
    assert first.evaluated == 1

    second = await loop.run_tick(now=T0 + 1)
    assert second.closed == [position.id]

    [closed] = await trading.history(account.id)
    assert closed.close_price == 1.1050
    assert closed.pnl == pytest.approx(0.0050)
    assert await balance_of(account.id) == pytest.approx(10_000.005)

    assert broadcaster.publish.call_count == 2
    prices, candles = broadcaster.publish.call_args.args
    assert prices["EUR/USD"] == 1.1060
    assert candles["EUR/USD"]["1m"][-1]["high"] == 1.1060
    event_type, data = broadcaster.publish_event.call_args.args
    assert event_type == "position_closed"
    assert data["reason"] == "take_profit"


@pytest.mark.asyncio
async def test_tick_updates_every_series(market_state, uow_factory, settlement):
    loop = make_loop(market_state, uow_factory, settlement, PriceGenerator(seed=5))

    await loop.run_tick(now=T0)

    for instrument in market_state.instruments:
        for tf in market_state.timeframes:
            assert len(market_state.get_series(instrument, tf)) == 1
    assert loop.stats["ticks"] == 1


@pytest.mark.asyncio
async def test_stuck_settlement_does_not_stall_other_positions(market_state, uow_factory, locks, trading, account):
    stuck = await open_long(trading, account.id)
    other = await open_long(trading, account.id, tp=None, sl=2000.0, instrument="GOLD", entry=2034.5)
    settlement = StuckSettlement(uow_factory, locks, stuck_id=stuck.id)
    generator = ScriptedGenerator([{"EUR/USD": 1.2, "GOLD": 1990.0}])
    loop = make_loop(
        market_state, uow_factory, settlement, generator, settlement_timeout=0.1,
    )

    result = await loop.run_tick(now=T0)

    assert result.failed == [stuck.id]
    assert result.closed == [other.id]
    [still_open] = await trading.list_open(account.id)
    assert still_open.id == stuck.id


@pytest.mark.asyncio
async def test_loop_stops_on_stop_event(market_state, uow_factory, settlement):
    loop = make_loop(
        market_state, uow_factory, settlement, PriceGenerator(seed=1), tick_interval=30.0,
    )

    task = asyncio.create_task(loop.start())
    await asyncio.sleep(0.1)
    assert loop.is_running
    loop.stop()
    await asyncio.wait_for(task, timeout=1.0)

    assert not loop.is_running
    assert loop.stats["ticks"] == 1


@pytest.mark.asyncio
async def test_failing_tick_is_logged_and_loop_continues(market_state, settlement):
    broken_uow = MagicMock(side_effect=RuntimeError("database is locked"))
    loop = make_loop(
        market_state, broken_uow, settlement, PriceGenerator(seed=1), tick_interval=0.01,
    )

    task = asyncio.create_task(loop.start())
    await asyncio.sleep(0.1)
    loop.stop()
    await asyncio.wait_for(task, timeout=1.0)

    assert loop.stats["errors"] >= 2


class SlowCloseUnitOfWork(SqlAlchemyUnitOfWork):
    """Releases the session, then hangs after the commit already landed."""

    async def close(self) -> None:
        await super().close()
        await asyncio.Event().wait()


@pytest.mark.asyncio
async def test_timeout_after_commit_counts_as_closed(db, market_state, uow_factory, locks, trading, account, balance_of):
    position = await open_long(trading, account.id)
    settlement = SettlementExecutor(lambda: SlowCloseUnitOfWork(db.session_factory), locks)
    broadcaster = MagicMock(spec=IMarketBroadcaster)
    generator = ScriptedGenerator([{"EUR/USD": 1.1060}])
    loop = make_loop(
        market_state, uow_factory, settlement, generator, broadcaster, settlement_timeout=0.1,
    )

    result = await loop.run_tick(now=T0)

    assert result.closed == [position.id]
    assert result.failed == []
    assert loop.stats["settled"] == 1
    assert loop.stats["failed"] == 0
    assert broadcaster.publish_event.call_args.args[0] == "position_closed"
    assert await trading.list_open(account.id) == []
    assert await balance_of(account.id) == pytest.approx(10_000.005)
