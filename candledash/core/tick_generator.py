"""
Tick Generator - Synthetic OHLCV candles for every instrument.

Runs on its own thread and feeds a ChannelBridge. Each round produces one
candle per instrument (registry order) stamped with a shared logical time
that advances one simulated minute per round, whatever the wall clock does.
"""

import logging
import random
import threading
import time
from collections.abc import Callable

from candledash.core.channel import ChannelBridge
from candledash.core.config import DEFAULT_CONFIG, DashboardConfig
from candledash.core.errors import ChannelClosed
from candledash.core.instruments import Instrument, InstrumentRegistry
from candledash.core.models import Candle, Tick

logger = logging.getLogger(__name__)


class TickGenerator:
    """
    Random-walk candle source for a fixed set of instruments.

    The running price of each instrument is private to the generator; only
    finished Candle values ever leave it.

    Usage:
        generator = TickGenerator(registry)
        generator.start(bridge)
        ...
        bridge.request_shutdown()
        generator.join(timeout=1.5)
    """

    def __init__(
        self,
        registry: InstrumentRegistry,
        config: DashboardConfig | None = None,
        rng: random.Random | None = None,
        start_time: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the generator.

        Args:
            registry: Instruments to simulate
            config: Dashboard configuration (tick interval, spreads, volume range)
            rng: Random source (defaults to one seeded from config.seed)
            start_time: Initial logical time in epoch seconds (defaults to now)
            clock: Wall-clock source used when start_time is not given
        """
        self.registry = registry
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random.Random(self.config.seed)

        self.time = int(clock()) if start_time is None else start_time
        self.rounds = 0
        self._prices: list[float] = [i.seed_price for i in registry]
        self._thread: threading.Thread | None = None

    def price(self, instrument_id: int) -> float:
        """Current running price of an instrument."""
        return self._prices[self.registry[instrument_id].id]

    def next_candle(self, instrument: Instrument) -> Candle:
        """Advance one instrument's running price and build its candle."""
        volatility = instrument.volatility
        spread = volatility * self.config.wick_spread_ratio

        open_ = self._prices[instrument.id]
        close = open_ + self.rng.uniform(-volatility, volatility)
        self._prices[instrument.id] = close

        high = max(open_, close) + self.rng.uniform(0.0, spread)
        low = min(open_, close) - self.rng.uniform(0.0, spread)
        volume = (
            self.rng.uniform(self.config.volume_min, self.config.volume_max)
            * instrument.volume_scale
        )

        return Candle(
            time=self.time,
            open=open_,
            high=high,
            low=low,
            close=close,
            volume=volume,
        )

    def generate_round(self) -> list[Tick]:
        """
        Produce one tick per instrument and advance the logical clock.

        Returns:
            Ticks in registry order, all sharing the same time
        """
        ticks = [Tick(instrument.id, self.next_candle(instrument)) for instrument in self.registry]
        self.time += self.config.logical_step_seconds
        self.rounds += 1
        return ticks

    def run(self, bridge: ChannelBridge) -> None:
        """
        Generate rounds until shutdown is requested or the channel closes.

        Args:
            bridge: Channel to the consumer loop
        """
        logger.info(f"Tick generator started for {len(self.registry)} instruments")

        while not bridge.shutdown_requested:
            try:
                for tick in self.generate_round():
                    bridge.send(tick)
            except ChannelClosed:
                logger.info("Channel closed, tick generator stopping")
                return

            if bridge.wait_for_shutdown(self.config.tick_interval_seconds):
                break

        logger.info(f"Tick generator stopped after {self.rounds} rounds")

    def start(self, bridge: ChannelBridge) -> threading.Thread:
        """Run the generator on a daemon thread."""
        self._thread = threading.Thread(
            target=self.run,
            args=(bridge,),
            name="tick-generator",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the generator thread to finish.

        Returns:
            True if the thread is no longer running
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        alive = self._thread.is_alive()
        if alive:
            logger.warning(f"Tick generator still running after {timeout}s join; leaving it detached")
        return not alive

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
