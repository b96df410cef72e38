#!/usr/bin/env python3
"""
Unit tests for the tick generator and the channel bridge.

Run with:
    python -m pytest tests/test_tick_generator.py -v
"""

import random
import sys
import time
from pathlib import Path

# Add project root to path for standalone execution
sys.path.insert(0, str(Path(__file__).parent.parent))

# ruff: noqa: E402
import pytest

from candledash.core.channel import ChannelBridge
from candledash.core.config import DashboardConfig
from candledash.core.errors import ChannelClosed
from candledash.core.instruments import DEFAULT_INSTRUMENTS, InstrumentRegistry, InstrumentSpec
from candledash.core.models import SHUTDOWN, Currency, Tick
from candledash.core.tick_generator import TickGenerator

START_TIME = 1_700_000_000


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll a condition until it holds or the timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def make_generator(seed: int = 7, **config_overrides) -> TickGenerator:
    """Helper to build a seeded generator over the default markets."""
    config = DashboardConfig(**config_overrides)
    registry = InstrumentRegistry(DEFAULT_INSTRUMENTS)
    return TickGenerator(registry, config, rng=random.Random(seed), start_time=START_TIME)


class TestCandleGeneration:
    """Tests for synthetic candle values."""

    def test_high_low_invariant_holds(self):
        """Test every generated candle brackets its open and close."""
        generator = make_generator()
        for _ in range(500):
            for tick in generator.generate_round():
                c = tick.candle
                assert c.low <= min(c.open, c.close)
                assert c.high >= max(c.open, c.close)
                assert c.volume >= 0

    def test_volume_within_scaled_range(self):
        """Test volume is drawn from 100..1000 times the volume scale."""
        generator = make_generator()
        for _ in range(100):
            for tick in generator.generate_round():
                scale = generator.registry[tick.instrument_id].volume_scale
                assert 100.0 * scale <= tick.candle.volume <= 1000.0 * scale

    def test_single_tick_close_within_volatility(self):
        """Test one tick moves the seed price by at most the volatility."""
        registry = InstrumentRegistry([InstrumentSpec("USD/BTC", Currency.USD, 103879.0, 100.0, 5.0)])
        generator = TickGenerator(registry, rng=random.Random(1), start_time=START_TIME)

        (tick,) = generator.generate_round()
        candle = tick.candle

        assert candle.open == 103879.0
        assert 103879.0 - 100.0 <= candle.close <= 103879.0 + 100.0
        assert candle.high >= candle.close
        assert candle.low <= candle.close

    def test_open_continues_previous_close(self):
        """Test each candle opens at the previous candle's close."""
        generator = make_generator()
        first = generator.generate_round()
        second = generator.generate_round()
        for a, b in zip(first, second):
            assert b.candle.open == a.candle.close

    def test_running_price_tracks_last_close(self):
        """Test the running price starts at the seed and follows each close."""
        generator = make_generator()
        assert [generator.price(i) for i in range(4)] == [
            spec.seed_price for spec in DEFAULT_INSTRUMENTS
        ]

        for _ in range(3):
            ticks = generator.generate_round()
            for tick in ticks:
                assert generator.price(tick.instrument_id) == tick.candle.close

    def test_price_of_unknown_instrument_raises(self):
        """Test asking for an unregistered id fails loudly."""
        with pytest.raises(LookupError):
            make_generator().price(99)

    def test_zero_volatility_is_flat(self):
        """Test an instrument without volatility never moves."""
        registry = InstrumentRegistry([InstrumentSpec("FLAT", Currency.USD, 10.0, 0.0, 1.0)])
        generator = TickGenerator(registry, rng=random.Random(3), start_time=START_TIME)
        for _ in range(10):
            (tick,) = generator.generate_round()
            assert tick.candle.open == tick.candle.close == tick.candle.high == tick.candle.low == 10.0

    def test_seeded_generators_are_reproducible(self):
        """Test the same seed yields the same stream."""
        a = make_generator(seed=42)
        b = make_generator(seed=42)
        assert a.generate_round() == b.generate_round()


class TestLogicalClock:
    """Tests for the round-based logical clock."""

    def test_round_shares_time(self):
        """Test all instruments in one round carry the same time."""
        generator = make_generator()
        times = {tick.candle.time for tick in generator.generate_round()}
        assert times == {START_TIME}

    def test_clock_advances_sixty_per_round(self):
        """Test the clock advances one simulated minute per round."""
        generator = make_generator()
        rounds = [generator.generate_round() for _ in range(3)]
        assert [r[0].candle.time for r in rounds] == [START_TIME, START_TIME + 60, START_TIME + 120]

    def test_instrument_order_is_fixed(self):
        """Test ticks follow registry order."""
        generator = make_generator()
        ids = [tick.instrument_id for tick in generator.generate_round()]
        assert ids == [0, 1, 2, 3]


class TestGeneratorThread:
    """Tests for the producer thread lifecycle."""

    def test_stops_on_shutdown_request(self):
        """Test the thread exits promptly once shutdown is requested."""
        generator = make_generator(tick_interval_seconds=0.01)
        bridge = ChannelBridge()

        generator.start(bridge)
        assert wait_for(lambda: bridge.pending() >= 8)
        bridge.request_shutdown()

        assert generator.join(timeout=2.0)
        assert not generator.is_running

    def test_stops_when_channel_closed(self):
        """Test a closed channel stops the producer without raising."""
        generator = make_generator(tick_interval_seconds=0.01)
        bridge = ChannelBridge()
        bridge.close()

        generator.run(bridge)  # Returns instead of looping forever

        assert bridge.pending() == 0
        assert generator.rounds == 1

    def test_messages_arrive_in_order(self):
        """Test ticks for one instrument are received oldest first."""
        generator = make_generator(tick_interval_seconds=0.01)
        bridge = ChannelBridge()
        generator.start(bridge)
        assert wait_for(lambda: bridge.pending() >= 12)
        bridge.request_shutdown()
        generator.join(timeout=2.0)

        times = []
        while (message := bridge.try_receive()) is not None:
            if message.instrument_id == 0:
                times.append(message.candle.time)
        assert times == sorted(times)
        assert len(times) >= 3


class TestChannelBridge:
    """Tests for the producer/consumer handoff."""

    def test_try_receive_empty_returns_none(self):
        """Test receiving from an empty channel does not block."""
        assert ChannelBridge().try_receive() is None

    def test_fifo_order(self):
        """Test messages come out in the order they went in."""
        bridge = ChannelBridge()
        generator = make_generator()
        ticks = generator.generate_round()
        for tick in ticks:
            bridge.send(tick)
        bridge.send(SHUTDOWN)

        received = [bridge.try_receive() for _ in range(5)]
        assert received == [*ticks, SHUTDOWN]
        assert bridge.try_receive() is None

    def test_send_after_close_raises(self):
        """Test the producer sees ChannelClosed once the consumer is gone."""
        bridge = ChannelBridge()
        bridge.close()
        with pytest.raises(ChannelClosed):
            bridge.send(SHUTDOWN)

    def test_request_shutdown_is_idempotent(self):
        """Test cancellation can be requested repeatedly without error."""
        bridge = ChannelBridge()
        bridge.request_shutdown()
        bridge.request_shutdown()
        assert bridge.shutdown_requested
        assert bridge.wait_for_shutdown(0.0)

    def test_full_bounded_channel_raises(self):
        """Test a bounded channel that stays full reports ChannelClosed."""
        bridge = ChannelBridge(maxsize=1)
        bridge.send(SHUTDOWN)
        with pytest.raises(ChannelClosed):
            bridge.send(SHUTDOWN, timeout=0.01)

    def test_tick_is_a_value(self):
        """Test ticks compare by value."""
        generator = make_generator()
        tick = generator.generate_round()[0]
        assert tick == Tick(tick.instrument_id, tick.candle)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
