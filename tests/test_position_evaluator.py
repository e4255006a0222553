import pytest

from backend.domain.entities.position import Position, PositionSide
from backend.domain.services.pnl_calculator import realized_pnl, required_margin
from backend.domain.services.position_evaluator import CloseReason, PositionEvaluator


def make_position(side, entry, size=1.0, tp=None, sl=None, instrument="EUR/USD", pid=1):
    return Position(
        owner_id=1, instrument=instrument, size=size, side=side,
        entry_price=entry, take_profit=tp, stop_loss=sl, id=pid,
    )


def test_long_take_profit_closes_at_threshold_not_market():
    evaluator = PositionEvaluator()
    position = make_position(PositionSide.BUY, 1.1000, tp=1.1050)

    assert evaluator.evaluate([position], {"EUR/USD": 1.1030}) == []
    [instruction] = evaluator.evaluate([position], {"EUR/USD": 1.1060})

    assert instruction.reason == CloseReason.TAKE_PROFIT
    assert instruction.close_price == 1.1050
    assert instruction.pnl == pytest.approx(0.0050)


def test_short_stop_loss():
    evaluator = PositionEvaluator()
    position = make_position(PositionSide.SELL, 2000.0, size=0.5, sl=2010.0, instrument="GOLD")

    [instruction] = evaluator.evaluate([position], {"GOLD": 2015.0})

    assert instruction.reason == CloseReason.STOP_LOSS
    assert instruction.close_price == 2010.0
    assert instruction.pnl == pytest.approx(-5.0)


def test_short_take_profit_inverts_comparison():
    position = make_position(PositionSide.SELL, 1.2000, tp=1.1900)

    assert PositionEvaluator().check(position, 1.1950) is None
    instruction = PositionEvaluator().check(position, 1.1890)
    assert instruction.reason == CloseReason.TAKE_PROFIT
    assert instruction.pnl == pytest.approx(0.0100)


def test_long_stop_loss():
    position = make_position(PositionSide.BUY, 1.1000, sl=1.0950)

    instruction = PositionEvaluator().check(position, 1.0900)
    assert instruction.reason == CloseReason.STOP_LOSS
    assert instruction.close_price == 1.0950
    assert instruction.pnl == pytest.approx(-0.0050)


def test_no_thresholds_never_closes():
    position = make_position(PositionSide.BUY, 1.1000)
    evaluator = PositionEvaluator()

    for price in (0.0001, 1.1, 1000.0):
        assert evaluator.evaluate([position], {"EUR/USD": price}) == []


def test_take_profit_wins_tie_break():
    # Inverted levels: both conditions true at the same price
    position = make_position(PositionSide.BUY, 1.1000, tp=1.0900, sl=1.1100)

    instruction = PositionEvaluator().check(position, 1.1000)
    assert instruction.reason == CloseReason.TAKE_PROFIT
    assert instruction.close_price == 1.0900


def test_missing_price_and_closed_positions_are_skipped():
    evaluator = PositionEvaluator()
    no_price = make_position(PositionSide.BUY, 60000.0, tp=61000.0, instrument="BTC/USD", pid=1)
    closed = make_position(PositionSide.BUY, 1.1000, tp=1.1050, pid=2)
    closed.close(1.1050, 0.005, 1000.0)

    assert evaluator.evaluate([no_price, closed], {"EUR/USD": 2.0}) == []


def test_manual_close_shares_formula():
    assert realized_pnl(PositionSide.BUY, 1.1, 1.2, 2.0) == pytest.approx(0.2)
    assert realized_pnl(PositionSide.SELL, 1.1, 1.2, 2.0) == pytest.approx(-0.2)
    assert required_margin(1.0, 1.1, 100.0) == pytest.approx(0.011)
