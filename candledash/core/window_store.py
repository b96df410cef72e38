"""
Rolling window store - bounded candle history per instrument.

Owned by the dashboard loop thread; nothing else mutates it, so no locking.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

from candledash.core.errors import ConfigurationError, UnknownInstrumentError
from candledash.core.instruments import InstrumentRegistry
from candledash.core.models import Candle

logger = logging.getLogger(__name__)


@dataclass
class CandleWindow:
    """
    Most recent candles for one instrument, oldest first.

    Holds at most maxlen candles; appending past that evicts the oldest.
    """

    instrument_id: int
    candles: deque[Candle] = field(default_factory=lambda: deque(maxlen=30))

    # close(newest) - close(previous newest); 0.0 until two candles arrived
    last_delta: float = 0.0

    # close(newest); None until the first candle
    last_price: float | None = None

    @classmethod
    def with_capacity(cls, instrument_id: int, capacity: int) -> "CandleWindow":
        return cls(instrument_id=instrument_id, candles=deque(maxlen=capacity))

    @property
    def newest(self) -> Candle | None:
        return self.candles[-1] if self.candles else None

    @property
    def oldest(self) -> Candle | None:
        return self.candles[0] if self.candles else None

    def add(self, candle: Candle) -> None:
        """Append a candle, updating the delta and last price."""
        newest = self.newest
        if newest is not None:
            self.last_delta = candle.close - newest.close

        self.candles.append(candle)
        self.last_price = candle.close

    def __len__(self) -> int:
        return len(self.candles)

    def clear(self) -> None:
        """Clear all buffered data."""
        self.candles.clear()
        self.last_delta = 0.0
        self.last_price = None


class RollingWindowStore:
    """
    Manages CandleWindow instances for every registered instrument.

    Windows are created up front for all instruments and indexed by id.
    """

    def __init__(self, registry: InstrumentRegistry, capacity: int = 30):
        """
        Initialize one window per instrument.

        Args:
            registry: Registered instruments
            capacity: Max candles retained per instrument

        Raises:
            ConfigurationError: If capacity is below 1
        """
        if capacity < 1:
            raise ConfigurationError(f"Window capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._windows: list[CandleWindow] = [
            CandleWindow.with_capacity(instrument.id, capacity) for instrument in registry
        ]

    def ingest(self, instrument_id: int, candle: Candle) -> None:
        """
        Apply a freshly generated candle to its instrument's window.

        Raises:
            UnknownInstrumentError: If the id was never registered
        """
        window = self.window(instrument_id)
        window.add(candle)
        logger.debug(
            f"Ingested candle for instrument {instrument_id}: "
            f"close={candle.close:.4f} delta={window.last_delta:+.4f} len={len(window)}"
        )

    def window(self, instrument_id: int) -> CandleWindow:
        """Get the window for an instrument id."""
        if not 0 <= instrument_id < len(self._windows):
            raise UnknownInstrumentError(instrument_id)
        return self._windows[instrument_id]

    def candles(self, instrument_id: int) -> list[Candle]:
        """Snapshot of an instrument's candles, oldest first."""
        return list(self.window(instrument_id).candles)

    def last_delta(self, instrument_id: int) -> float:
        return self.window(instrument_id).last_delta

    def last_price(self, instrument_id: int) -> float | None:
        return self.window(instrument_id).last_price

    def __len__(self) -> int:
        return len(self._windows)

    def clear(self) -> None:
        """Clear all buffered data for all instruments."""
        for window in self._windows:
            window.clear()
