import random
from collections import deque

from backend.application.services.candle_aggregator import CandleAggregator
from backend.application.state.market_state import MarketStateManager
from backend.domain.value_objects.timeframe import TIMEFRAME_SECONDS

T0 = 1_700_000_000


def test_first_tick_opens_candle_at_aligned_start():
    series = deque(maxlen=200)
    CandleAggregator().on_tick(series, 60, 1.1, now=T0 + 17.4)

    assert len(series) == 1
    candle = series[0]
    assert candle.period_start % 60 == 0
    assert candle.period_start <= T0 + 17.4 < candle.period_start + 60
    assert candle.open == candle.high == candle.low == candle.close == 1.1


def test_ticks_in_same_period_update_in_place():
    agg = CandleAggregator()
    series = deque(maxlen=200)
    start = (T0 // 60) * 60
    for offset, price in [(1, 1.10), (10, 1.12), (20, 1.09), (59, 1.11)]:
        agg.on_tick(series, 60, price, now=start + offset)

    assert len(series) == 1
    candle = series[0]
    assert candle.open == 1.10
    assert candle.high == 1.12
    assert candle.low == 1.09
    assert candle.close == 1.11


def test_period_crossing_appends_and_freezes_previous():
    agg = CandleAggregator()
    series = deque(maxlen=200)
    start = (T0 // 60) * 60
    agg.on_tick(series, 60, 1.10, now=start + 5)
    agg.on_tick(series, 60, 1.20, now=start + 65)
    agg.on_tick(series, 60, 1.30, now=start + 70)

    assert [c.period_start for c in series] == [start, start + 60]
    assert series[0].close == 1.10
    assert series[0].high == 1.10
    assert series[1].open == 1.20
    assert series[1].close == 1.30


def test_series_capped_at_200_evicting_oldest():
    agg = CandleAggregator()
    series = deque(maxlen=200)
    start = (T0 // 60) * 60
    for minute in range(250):
        agg.on_tick(series, 60, 1.0 + minute / 1000, now=start + minute * 60)

    assert len(series) == 200
    assert series[0].period_start == start + 50 * 60
    assert series[-1].period_start == start + 249 * 60


def test_invariants_hold_for_random_walk_on_every_timeframe():
    rng = random.Random(11)
    state = MarketStateManager()
    agg = CandleAggregator()
    price = 1.08542
    now = float(T0)
    for _ in range(3000):
        price += rng.uniform(-0.5, 0.5) * price * 0.0001
        now += rng.choice([1.0, 1.0, 7.0, 45.0])
        agg.on_price(state, "EUR/USD", price, now)

    for tf, seconds in TIMEFRAME_SECONDS.items():
        series = state.get_series("EUR/USD", tf)
        assert 0 < len(series) <= 200
        starts = [c.period_start for c in series]
        assert all(a < b for a, b in zip(starts, starts[1:]))
        assert all(s % seconds == 0 for s in starts)
        for c in series:
            assert c.low <= c.open <= c.high
            assert c.low <= c.close <= c.high


def test_on_price_updates_every_configured_timeframe():
    state = MarketStateManager(timeframes=["1m", "1h"])
    CandleAggregator().on_price(state, "GOLD", 2034.5, now=T0)

    assert set(state.timeframes) == {"1m", "1h"}
    assert len(state.get_series("GOLD", "1m")) == 1
    assert len(state.get_series("GOLD", "1h")) == 1
    assert len(state.get_series("EUR/USD", "1m")) == 0
